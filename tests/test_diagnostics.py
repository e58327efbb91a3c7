"""Tests for the non-fatal diagnostic log."""

import logging

from apiwiki.diagnostics import Diagnostic, DiagnosticCode, DiagnosticLog


def test_warn_records_and_logs(caplog):
    """Each diagnostic is kept in order and logged at WARNING."""
    log = DiagnosticLog()

    with caplog.at_level(logging.WARNING, logger="apiwiki.diagnostics"):
        log.warn(DiagnosticCode.UNRESOLVED_UID, "does not resolve", uid="type:Gone")
        log.warn(DiagnosticCode.NAME_COLLISION, "renamed", path="Foo/Types/bar-2")

    assert [d.code for d in log] == [DiagnosticCode.UNRESOLVED_UID, DiagnosticCode.NAME_COLLISION]
    assert "[unresolved-uid] type:Gone: does not resolve" in caplog.text
    assert "Foo/Types/bar-2" in caplog.text


def test_empty_log_is_falsy_but_not_none():
    log = DiagnosticLog()

    assert len(log) == 0
    assert not log
    assert log is not None


def test_by_code_filters():
    log = DiagnosticLog()
    log.warn(DiagnosticCode.SIDECAR_INVALID, "bad", path="a.md")
    log.warn(DiagnosticCode.SIDECAR_CONFLICT, "taken", uid="ns:Foo")
    log.warn(DiagnosticCode.SIDECAR_INVALID, "worse", path="b.md")

    invalid = log.by_code(DiagnosticCode.SIDECAR_INVALID)

    assert [d.path for d in invalid] == ["a.md", "b.md"]


def test_extend_appends_other_log():
    first = DiagnosticLog()
    first.warn(DiagnosticCode.DUPLICATE_UID, "twice", uid="type:X")
    second = DiagnosticLog()
    second.warn(DiagnosticCode.AMBIGUOUS_FOLDER, "unclear", path="X")

    first.extend(second)

    assert len(first) == 2


def test_str_without_location():
    diagnostic = Diagnostic(code=DiagnosticCode.CONTAINMENT_CYCLE, message="loop")

    assert str(diagnostic) == "[containment-cycle] loop"
