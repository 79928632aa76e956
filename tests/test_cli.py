import pytest

import spark_apriori.cli as cli
from spark_apriori.a_priori import InvalidParameterError


class KeepAliveContext:
    """Wraps the shared test context so main() cannot stop it."""

    def __init__(self, sc):
        self._sc = sc
        self.stopped = False

    def __getattr__(self, name):
        return getattr(self._sc, name)

    def stop(self):
        self.stopped = True


@pytest.fixture
def data_file(tmp_path):
    path = tmp_path / "data.dat"
    path.write_text("a b\na c\na b c\n")
    return str(path)


def test_parser_defaults(data_file):
    args = cli.build_parser().parse_args(["--data", data_file])

    assert args.support == 0.5
    assert args.confidence == 0.5
    assert args.max_k is None
    assert args.marker is None
    assert args.master == "local[*]"
    assert not args.rules
    assert not args.verbose


def test_parser_requires_data():
    with pytest.raises(SystemExit):
        cli.build_parser().parse_args([])


def test_run_mines_and_generates_rules(sc, data_file, capsys):
    args = cli.build_parser().parse_args(
        ["--data", data_file, "--support", "0.6", "--confidence", "0.9", "--rules"]
    )

    frequent_itemsets, rules = cli.run(sc, args)

    assert len(frequent_itemsets) == 5
    assert {(r[0], r[1]) for r in rules} == {
        (frozenset("b"), frozenset("a")),
        (frozenset("c"), frozenset("a")),
    }
    out = capsys.readouterr().out
    assert "Loaded 3 transactions" in out
    assert "ASSOCIATION RULES RESULTS" in out


def test_run_without_rules(sc, data_file):
    args = cli.build_parser().parse_args(["--data", data_file, "--support", "1.0"])

    frequent_itemsets, rules = cli.run(sc, args)

    assert frequent_itemsets == [(frozenset("a"), 3)]
    assert rules is None


def test_main_stops_spark(sc, data_file, monkeypatch):
    context = KeepAliveContext(sc)
    monkeypatch.setattr(cli, "initialize_spark", lambda *args, **kwargs: context)

    frequent_itemsets, _ = cli.main(["--data", data_file, "--support", "0.6"])

    assert len(frequent_itemsets) == 5
    assert context.stopped


def refuse_spark(*args, **kwargs):
    raise AssertionError("Spark must not start for invalid arguments")


@pytest.mark.parametrize(
    "flag, value",
    [
        ("--support", "1.5"),
        ("--support", "0"),
        ("--confidence", "1.5"),
        ("--max-k", "0"),
    ],
)
def test_main_rejects_invalid_thresholds_before_spark(
    data_file, monkeypatch, flag, value
):
    monkeypatch.setattr(cli, "initialize_spark", refuse_spark)

    with pytest.raises(SystemExit) as excinfo:
        cli.main(["--data", data_file, flag, value])

    assert excinfo.value.code == 2


def test_run_checks_confidence_before_loading(data_file, monkeypatch):
    def refuse_load(*args, **kwargs):
        raise AssertionError("data must not be loaded for invalid arguments")

    monkeypatch.setattr(cli, "load_transactions", refuse_load)
    args = cli.build_parser().parse_args(
        ["--data", data_file, "--confidence", "2", "--rules"]
    )

    with pytest.raises(InvalidParameterError):
        cli.run(None, args)
