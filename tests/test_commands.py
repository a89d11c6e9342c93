from __future__ import annotations

from kitchen_puppet.commands import CommandBuilder


def test_drops_missing_fragments() -> None:
    builder = CommandBuilder(fragments=[None, "sudo -E puppet", "", "apply", None])
    assert builder.render() == "sudo -E puppet apply"


def test_custom_separator_and_chaining() -> None:
    builder = CommandBuilder(separator=" && ").add("cp a /etc/").add_if(False, "cp b /etc/").add_if(True, "cp c /x")
    assert str(builder) == "cp a /etc/ && cp c /x"


def test_empty_builder_renders_empty_string() -> None:
    builder = CommandBuilder(separator=" && ", fragments=[None])
    assert builder.render() == ""
    assert not builder
