import pytest

from kindprov.toml_normalize import (
    InvalidTomlError,
    normalize_toml,
    string_is_valid_toml,
    toml_equivalent,
)


def test_well_formatted_is_returned_as_is():
    text = 'name = "Test"\n\n[section]\n  key = "value"\n'
    assert normalize_toml(text) == text


def test_malformed_input_raises_and_keeps_input():
    text = "fruit = []\n[[fruit]]\n"
    with pytest.raises(InvalidTomlError) as info:
        normalize_toml(text)
    assert info.value.source == text


def test_unformatted_input_is_formatted():
    text = 'name = "test"\n[fruit.apple]\n[animal]\n[fruit]\n'
    expected = 'name = "test"\n\n[animal]\n\n[fruit]\n\n  [fruit.apple]\n'
    assert normalize_toml(text) == expected


@pytest.mark.parametrize("empty", [None, ""])
def test_empty_input(empty):
    assert normalize_toml(empty) == ""


def test_normalize_is_idempotent():
    text = '[plugins."io.containerd.grpc.v1.cri"]\nsandbox_image = "k8s.gcr.io/pause:3.2"\n'
    once = normalize_toml(text)
    assert normalize_toml(once) == once


def test_equivalent_formats():
    a = '[plugins."io.containerd.grpc.v1.cri".registry.mirrors."localhost:5000"]\n' \
        'endpoint = ["http://kind-registry:5000"]\n'
    b = (
        "[plugins]\n\n  [plugins.\"io.containerd.grpc.v1.cri\"]\n\n"
        "    [plugins.\"io.containerd.grpc.v1.cri\".registry]\n\n"
        "      [plugins.\"io.containerd.grpc.v1.cri\".registry.mirrors]\n\n"
        "        [plugins.\"io.containerd.grpc.v1.cri\".registry.mirrors.\"localhost:5000\"]\n"
        "          endpoint = [\"http://kind-registry:5000\"]\n"
    )
    assert toml_equivalent(a, b) is True
    assert toml_equivalent(a, "x = 1") is False


@pytest.mark.parametrize(
    "value, errors",
    [
        (object(), 1),
        ("the_answer_to_everything = 42", 0),
        (None, 1),
        ("", 0),
        ("\n".join(["fruits = []", "[[fruits]]"]), 1),
    ],
)
def test_string_is_valid_toml(value, errors):
    warns, errs = string_is_valid_toml(value, "")
    assert len(warns) == 0
    assert len(errs) == errors