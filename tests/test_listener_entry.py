import functools

import pytest

from object_listeners.listener import ArgCallback, ListenerEntry, NoArgCallback, as_callback


def test_zero_param_callable_is_noarg() -> None:
    cb = as_callback(lambda: None)
    assert isinstance(cb, NoArgCallback)


def test_positional_param_is_arg() -> None:
    assert isinstance(as_callback(lambda data: None), ArgCallback)
    assert isinstance(as_callback(lambda *args: None), ArgCallback)


def test_defaulted_params_keep_their_default() -> None:
    assert isinstance(as_callback(lambda data=None: None), NoArgCallback)
    assert isinstance(as_callback(lambda i=3: i), NoArgCallback)
    assert isinstance(as_callback(lambda value, extra=None: None), ArgCallback)


def test_keyword_only_params_do_not_receive_payload() -> None:
    def handler(*, flag: bool = False) -> None:
        pass

    assert isinstance(as_callback(handler), NoArgCallback)


def test_bound_method_self_is_not_counted() -> None:
    class Hud:
        def refresh(self) -> None:
            pass

        def show(self, value) -> None:
            pass

    hud = Hud()
    assert isinstance(as_callback(hud.refresh), NoArgCallback)
    assert isinstance(as_callback(hud.show), ArgCallback)


def test_partial_with_bound_args() -> None:
    def add(a, b):
        return a + b

    assert isinstance(as_callback(functools.partial(add, 1)), ArgCallback)
    assert isinstance(as_callback(functools.partial(add, 1, 2)), NoArgCallback)


def test_explicit_variant_wins_over_inference() -> None:
    assert isinstance(as_callback(lambda x: None, expects_payload=False), NoArgCallback)
    assert isinstance(as_callback(lambda: None, expects_payload=True), ArgCallback)


def test_prebuilt_callback_passes_through() -> None:
    cb = NoArgCallback(lambda: None)
    assert as_callback(cb) is cb


def test_non_callable_rejected() -> None:
    with pytest.raises(TypeError):
        as_callback("not a function")  # type: ignore[arg-type]


def test_invoke_routes_payload_by_variant() -> None:
    seen = []
    no_arg = ListenerEntry(NoArgCallback(lambda: seen.append("noarg")))
    with_arg = ListenerEntry(ArgCallback(seen.append), "sink")

    no_arg.invoke(42)
    with_arg.invoke(42)
    with_arg.invoke()

    assert seen == ["noarg", 42, None]
    assert no_arg.listener_id == ""
    assert with_arg.expects_payload is True
    assert no_arg.expects_payload is False


def test_entries_compare_by_identity() -> None:
    fn = NoArgCallback(lambda: None)
    assert ListenerEntry(fn, "a") != ListenerEntry(fn, "a")
