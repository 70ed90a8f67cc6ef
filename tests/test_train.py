import pytest

from microtensor.train import TARGETS, build_model, main, train


def test_build_model_layers_and_parameter_count():
    model = build_model()
    assert list(model.state_dict()) == [
        "fc1.weight", "fc1.bias", "fc2.weight", "fc2.bias", "fc3.weight", "fc3.bias",
    ]
    assert len(model.parameters()) == 41


def test_train_records_every_epoch_and_reports():
    result = train(20, 10)
    assert len(result.losses) == 20
    assert [epoch for epoch, _ in result.reports] == [0, 10]
    assert result.reports[0][1] == result.losses[0]
    assert result.reports[1][1] == result.losses[10]


def test_losses_and_predictions_are_bounded():
    result = train(5, 1)
    assert len(result.predictions) == len(TARGETS)
    assert all(-1.0 <= p <= 1.0 for p in result.predictions)
    assert all(0.0 <= loss <= 16.0 for loss in result.losses)


def test_last_loss_matches_last_predictions():
    result = train(3, 1)
    targets = [t[0] for t in TARGETS]
    squared = sum((p - t) ** 2 for p, t in zip(result.predictions, targets))
    assert result.losses[-1] == pytest.approx(squared)


def test_zero_epochs_leaves_zero_predictions():
    result = train(0, 10)
    assert result.losses == []
    assert result.reports == []
    assert result.predictions == [0.0, 0.0, 0.0, 0.0]


@pytest.mark.parametrize("epochs, report_every", [(-1, 10), (5, 0)])
def test_invalid_arguments(epochs, report_every):
    with pytest.raises(ValueError):
        train(epochs, report_every)


def test_main_prints_reports_then_predictions(capsys):
    assert main(["--epochs", "20", "--report-every", "10"]) == 0
    lines = capsys.readouterr().out.splitlines()
    assert len(lines) == 6
    assert lines[0].startswith("[EPOCH-0] Loss: ")
    assert lines[1].startswith("[EPOCH-10] Loss: ")
    assert all(-1.0 <= float(line) <= 1.0 for line in lines[2:])


def test_main_rejects_bad_report_interval():
    with pytest.raises(SystemExit) as excinfo:
        main(["--report-every", "0"])
    assert excinfo.value.code == 2