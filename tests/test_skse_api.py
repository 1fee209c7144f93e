import pytest

from jcontainers import skse_api
from jcontainers.skse_api import FAKE_FORM, FakeApi, SilentApi


@pytest.fixture(autouse=True)
def _restore_fake_api():
    skse_api.set_fake_api()
    yield
    skse_api.set_fake_api()


def test_fake_mod_name_from_index():
    api = FakeApi()
    assert api.loaded_mod_name(ord("Z")) == "Z"
    assert api.loaded_light_mod_name(ord("A")) == "A"
    assert api.loaded_mod_name(ord("|")) is None
    assert api.loaded_mod_name(ord("a")) is None
    assert api.loaded_light_mod_name(ord("|")) is None
    assert api.loaded_light_mod_name(ord("a")) is None


def test_fake_mod_name_index_zero_gives_first_mod():
    assert FakeApi().loaded_mod_name(0) == "A"


def test_fake_form_from_file():
    api = FakeApi()
    result = api.form_from_file("Skyrim.esm", 0x12345678)
    assert result >> 24 == ord("S")
    assert result & 0x00FFFFFF == 0x12345678 & 0x00FFFFFF
    assert api.form_from_file("", 5) is None
    assert api.form_from_file("skyrim.esm", 5) is None


def test_fake_handles():
    api = FakeApi()
    assert api.resolve_handle(0x14) == 0x14
    assert api.lookup_form(0x14) is FAKE_FORM
    assert api.try_retain_handle(0x14) is True
    assert api.release_handle(0x14) is None
    assert api.console_print("%s", "x") is None


def test_silent_api():
    api = SilentApi()
    assert api.form_from_file("Skyrim.esm", 7) == 0
    assert api.loaded_mod_name(3) == ""
    assert api.loaded_light_mod_name(3) == ""
    assert api.resolve_handle(0x14) == 0
    assert api.lookup_form(0x14) is None
    assert api.try_retain_handle(0x14) is True


def test_module_functions_follow_selected_api():
    assert skse_api.loaded_mod_name(ord("Z")) == "Z"
    assert skse_api.resolve_handle(0x20) == 0x20
    skse_api.set_silent_api()
    assert skse_api.loaded_mod_name(ord("Z")) == ""
    assert skse_api.resolve_handle(0x20) == 0
    assert skse_api.form_from_file("Skyrim.esm", 7) == 0
    skse_api.set_fake_api()
    assert skse_api.form_from_file("", 7) is None


def test_lookup_form_zero_handle_is_none():
    assert skse_api.lookup_form(0) is None
    assert skse_api.lookup_form(0x14) is FAKE_FORM


def test_module_retain_release_and_print():
    assert skse_api.try_retain_handle(0x14) is True
    assert skse_api.release_handle(0x14) is None
    assert skse_api.console_print("%d objects", 3) is None
    assert skse_api.loaded_light_mod_name(ord("B")) == "B"