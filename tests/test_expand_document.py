from pathlib import Path

import yaml

from yaml_expand.core.expand.expand_document import expand_document, expand_documents


REPL = {"%placeholder%": ["replace_value1", "replace_value2"]}


def test_expand_mixed_document():
    doc = yaml.safe_load(
        """
key1: value1
key2|expand: "test%placeholder%"
key3:
  subkey1|expand: "%placeholder%"
  subkey2: subvalue2
key4|expand:
  - item1
"""
    )
    got, found, expanded = expand_document(doc, REPL)

    assert got == {
        "key1": "value1",
        "key2": ["testreplace_value1", "testreplace_value2"],
        "key3": {"subkey1": ["replace_value1", "replace_value2"], "subkey2": "subvalue2"},
        "key4": ["item1"],
    }
    assert found is True
    assert expanded is True
    assert list(got.keys()) == ["key1", "key2", "key3", "key4"]


def test_expand_untagged_document_is_unchanged():
    doc = {"a": 1, "b": ["x", {"c": "%placeholder%"}], "d": None, "e": {"f": True}}
    got, found, expanded = expand_document(doc, REPL)
    assert got == doc
    assert found is False
    assert expanded is False


def test_expand_substitutes_placeholder():
    got, found, expanded = expand_document({"k|expand": "a%p%b"}, {"%p%": ["x", "y"]})
    assert got == {"k": ["axb", "ayb"]}
    assert found is True
    assert expanded is True


def test_expand_tag_without_placeholder_strips_tag_only():
    got, found, expanded = expand_document({"k|expand": "novalue"}, {"%p%": ["x"]})
    assert got == {"k": "novalue"}
    assert found is True
    assert expanded is False


def test_expand_tag_over_sequence_does_not_substitute():
    got, found, expanded = expand_document({"k|expand": ["item1", "%p%"]}, {"%p%": ["x"]})
    assert got == {"k": ["item1", "%p%"]}
    assert found is True
    assert expanded is False


def test_expand_output_is_idempotent():
    repl = {"%p%": ["x", "y"]}
    once, _, _ = expand_document({"k|expand": "a%p%", "n": {"m|expand": "%p%"}}, repl)
    twice, found, expanded = expand_document(once, repl)
    assert twice == once
    assert found is False
    assert expanded is False


def test_expand_nested_tag_does_not_set_outer_flags():
    got, found, expanded = expand_document({"outer": {"inner|expand": "%p%"}}, {"%p%": ["x", "y"]})
    assert got == {"outer": {"inner": ["x", "y"]}}
    assert found is False
    assert expanded is False


def test_expand_tag_inside_sequence_of_mappings():
    doc = [{"a|expand": "%p%"}, "plain", {"b": 1}]
    got, found, expanded = expand_document(doc, {"%p%": ["x"]})
    assert got == [{"a": ["x"]}, "plain", {"b": 1}]
    assert found is False
    assert expanded is False


def test_expand_tagged_mapping_value_recurses():
    doc = {"outer|expand": {"inner|expand": "%p%", "other": "%p%"}}
    got, found, expanded = expand_document(doc, {"%p%": ["x"]})
    assert got == {"outer": {"inner": ["x"], "other": "%p%"}}
    assert found is True
    # the nested key was renamed, so the value differs from the original
    assert expanded is True


def test_expand_removes_only_first_tag_occurrence():
    got, found, _ = expand_document({"a|expand|expand": "v"}, {"%p%": ["x"]})
    assert got == {"a|expand": "v"}
    assert found is True


def test_expand_tag_in_middle_of_key():
    got, _, _ = expand_document({"pre|expand_post": "%p%"}, {"%p%": ["x"]})
    assert got == {"pre_post": ["x"]}


def test_expand_non_string_keys_and_scalars_pass_through():
    doc = {1: "%p%", None: [1.5, False], "k|expand": 3}
    got, found, expanded = expand_document(doc, {"%p%": ["x"]})
    assert got == {1: "%p%", None: [1.5, False], "k": 3}
    assert found is True
    assert expanded is False


def test_expand_scalar_document():
    assert expand_document("%p%", {"%p%": ["x"]}) == ("%p%", False, False)
    assert expand_document(None, {"%p%": ["x"]}) == (None, False, False)


def test_expand_does_not_mutate_input():
    doc = {"k|expand": "%p%", "n": [{"m|expand": "%p%"}]}
    snapshot = yaml.safe_load(yaml.safe_dump(doc))
    expand_document(doc, {"%p%": ["x"]})
    assert doc == snapshot


def test_expand_documents_ors_flags():
    docs, found, expanded = expand_documents(
        [{"a": 1}, {"k|expand": "none"}, {"j|expand": "%p%"}], {"%p%": ["x"]}
    )
    assert docs == [{"a": 1}, {"k": "none"}, {"j": ["x"]}]
    assert found is True
    assert expanded is True


def test_expand_golden_example():
    from yaml_expand.core.expand.replacements import load_replacements

    examples = Path(__file__).resolve().parent.parent / "examples"
    repl = load_replacements(examples / "replacements")
    doc = yaml.safe_load((examples / "config.yaml").read_text(encoding="utf-8"))
    expected = yaml.safe_load((examples / "config-expected.yaml").read_text(encoding="utf-8"))

    got, found, expanded = expand_document(doc, repl)
    assert got == expected
    assert found is True
    assert expanded is True


def test_expand_nan_under_tag_is_not_a_substitution():
    doc = yaml.safe_load("k|expand: .nan\n")
    got, found, expanded = expand_document(doc, {"%p%": ["x"]})
    assert list(got.keys()) == ["k"]
    assert got["k"] != got["k"]
    assert found is True
    assert expanded is False


def test_expand_key_collision_after_tag_removal():
    repl = {"%p%": ["x", "y"]}

    got, _, _ = expand_document({"a": 1, "a|expand": "%p%", "b": 2}, repl)
    assert list(got.keys()) == ["a", "b"]
    assert got["a"] == ["x", "y"]

    got, _, _ = expand_document({"a|expand": "%p%", "a": 1}, repl)
    assert got == {"a": 1}


def test_expand_leaves_replacements_untouched():
    repl = {"%p%": ["x", "y"], "%q%": ["z"]}
    snapshot = {k: list(v) for k, v in repl.items()}
    expand_document({"k|expand": "%p%%q%", "n": [{"m|expand": "%q%"}]}, repl)
    assert repl == snapshot
    assert list(repl.keys()) == ["%p%", "%q%"]
