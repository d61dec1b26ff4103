import json

import pytest

from sapconf_saptune_check.cli import main


@pytest.mark.parametrize("argv", [[], ["tuned"], ["sapconf", "saptune"], ["--json"]])
def test_usage_errors_exit_3_without_reading_facts(make_facts, capsys, argv):
    facts = make_facts()
    with pytest.raises(SystemExit) as excinfo:
        main(argv, facts=facts)
    assert excinfo.value.code == 3
    assert facts.calls == []
    assert "usage:" in capsys.readouterr().err


def test_clean_sapconf_report(make_facts, capsys):
    assert main(["sapconf"], facts=make_facts()) == 0
    out = capsys.readouterr().out
    assert "Only *one* of both can be used at the same time!" in out
    assert "[ OK ] sapconf package has version 5.0.5." in out
    assert "0 failure(s), 0 warning(s)" in out
    assert out.rstrip().endswith("No problems have been found. sapconf should work properly.")


def test_failed_report_exits_1(make_facts, capsys):
    services = {"sapconf.service": (True, True), "tuned.service": (False, True)}
    assert main(["sapconf"], facts=make_facts(services=services)) == 1
    out = capsys.readouterr().out
    assert "[FAIL] tuned.service is inactive although sapconf.service is active." in out
    assert "[WARN] tuned.service is enabled.  -> " in out
    assert "1 failure(s), 1 warning(s)" in out
    assert "1 error(s) have been found. sapconf will not work properly!" in out


def test_warned_report_exits_0(make_facts, capsys):
    services = {"sapconf.service": (True, True), "tuned.service": (True, True)}
    assert main(["sapconf"], facts=make_facts(services=services)) == 0
    assert "1 warning(s) have been found." in capsys.readouterr().out


def test_hard_stop_exits_2(make_facts, capsys):
    assert main(["saptune"], facts=make_facts(packages={})) == 2
    out = capsys.readouterr().out
    assert out.rstrip().endswith("saptune is not installed.")
    assert "failure(s)" not in out


def test_json_output(make_facts, capsys):
    facts = make_facts(services={"sapconf.service": (False, False), "tuned.service": (True, True)}, profile="saptune")
    assert main(["saptune", "--json"], facts=facts) == 0
    payload = json.loads(capsys.readouterr().out)
    assert payload["subsystem"] == "saptune"
    assert payload["outcome"] == "clean"
    assert payload["exit_code"] == 0
    assert [finding["severity"] for finding in payload["findings"]] == ["OK"] * 7


def test_rich_output(make_facts, capsys):
    assert main(["sapconf", "--ui"], facts=make_facts(profile="balanced")) == 1
    out = capsys.readouterr().out
    assert "FAIL" in out
    assert "will not work properly" in out
