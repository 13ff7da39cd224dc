from inkstamp.core.errors import (
    GENERIC_MESSAGE, USER_MESSAGES, ElementBakeError, LoadError, RenderError,
    SaveError, user_message,
)


def test_each_category_has_its_own_message():
    assert user_message(LoadError("boom")) == USER_MESSAGES["load"]
    assert user_message(RenderError("boom")) == USER_MESSAGES["render"]
    assert user_message(ElementBakeError("e1", "boom")) == USER_MESSAGES["element"]
    assert user_message(SaveError("boom")) == USER_MESSAGES["save"]


def test_unknown_errors_fall_back_to_generic_message():
    assert user_message(RuntimeError("low level detail")) == GENERIC_MESSAGE


def test_load_error_status_is_shown():
    assert "404" in user_message(LoadError("not found", status=404))


def test_element_error_keeps_element_id():
    error = ElementBakeError("stamp-1", "no image")
    assert error.element_id == "stamp-1"
    assert "stamp-1" in str(error)
