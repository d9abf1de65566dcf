import pytest

from cmdkit.commands.caller import BasicCaller, CallerKind
from cmdkit.commands.descriptor import CommandDescriptor
from cmdkit.commands.exceptions import RegistrationFailure
from cmdkit.commands.markers import (
    command,
    execute,
    get_class_permission,
    get_command_marker,
    permission,
    tab_complete,
)
from cmdkit.commands.table import BindingKind, Signature, build_handler_table, derive_signature
from tests.sample_commands import AdminCommand, EmptyCommand, GiveCommand, WarpCommand


def _table(instance, strict=True):
    marker = get_command_marker(type(instance))
    descriptor = CommandDescriptor(name=marker.name)
    return build_handler_table(instance, descriptor, strict=strict)


# --- Signature derivation ---


class _Shapes:
    def both(self, caller, args): ...
    def caller_only(self, caller): ...
    def nothing(self): ...
    def too_many(self, caller, args, extra): ...
    def var_args(self, *args): ...
    def kw_default(self, caller, args, *, verbose=False): ...
    def kw_required(self, caller, *, args): ...


@pytest.mark.parametrize(
    "method,expected",
    [
        ("both", Signature.CALLER_AND_ARGS),
        ("caller_only", Signature.CALLER_ONLY),
        ("nothing", Signature.NO_ARGS),
        ("too_many", Signature.INVALID),
        ("var_args", Signature.INVALID),
        ("kw_default", Signature.CALLER_AND_ARGS),
        ("kw_required", Signature.INVALID),
    ],
)
def test_derive_signature(method, expected):
    assert derive_signature(getattr(_Shapes(), method)) == expected


# --- Table construction ---


def test_default_and_named_bindings():
    warp = WarpCommand()
    table = _table(warp)

    assert table.default.kind == BindingKind.DEFAULT
    assert table.default.signature == Signature.CALLER_ONLY
    assert table.subcommand_names() == ["list", "link", "set"]
    assert table.named["list"].signature == Signature.CALLER_AND_ARGS
    assert table.named["list"].permission.key == "warp.list"
    assert table.named["link"].permission is None
    assert table.definition is warp


def test_subcommand_keys_are_lower_cased():
    table = _table(WarpCommand())
    assert "set" in table.named
    assert table.subcommand("SET") is table.named["set"]


def test_bindings_are_bound_to_the_instance():
    warp = WarpCommand()
    table = _table(warp)
    table.named["link"].invoke(BasicCaller("Alex"), ["a"])
    assert warp.calls == [("link", "Alex", ["a"])]


def test_caller_narrowing_is_recorded():
    table = _table(WarpCommand())
    binding = table.named["set"]
    assert binding.callers == frozenset({CallerKind.PLAYER})
    assert binding.accepts(BasicCaller("Steve"))
    assert not binding.accepts(BasicCaller("CONSOLE", kind=CallerKind.CONSOLE))
    assert table.default.accepts(BasicCaller("CONSOLE", kind=CallerKind.CONSOLE))


def test_named_only_command():
    table = _table(AdminCommand())
    assert table.default is None
    assert table.named["reload"].signature == Signature.NO_ARGS


def test_no_handlers_returns_none():
    assert _table(EmptyCommand()) is None


def test_completion_binding():
    table = _table(GiveCommand())
    assert table.completion is not None
    assert table.completion.signature == Signature.CALLER_AND_ARGS
    assert table.completion.handler_name == "complete"


def test_invalid_signature_is_accepted_at_scan_time():
    @command("odd")
    class Odd:
        @execute
        def run(self, a, b, c):
            pass

    table = _table(Odd())
    assert table.default.signature == Signature.INVALID


def test_duplicate_subcommand_strict():
    @command("dup")
    class Dup:
        @execute("go")
        def first(self, caller):
            pass

        @execute("GO")
        def second(self, caller):
            pass

    with pytest.raises(RegistrationFailure, match="subcommand 'go'"):
        _table(Dup())


def test_duplicate_subcommand_last_wins():
    @command("dup")
    class Dup:
        @execute("go")
        def first(self, caller):
            pass

        @execute("GO")
        def second(self, caller):
            pass

    table = _table(Dup(), strict=False)
    assert table.named["go"].handler_name == "second"


def test_duplicate_default_strict():
    @command("dup")
    class Dup:
        @execute
        def first(self):
            pass

        @execute("")
        def second(self):
            pass

    with pytest.raises(RegistrationFailure, match="default handler"):
        _table(Dup())


def test_last_completion_marker_wins():
    @command("multi")
    class Multi:
        @execute
        def run(self):
            pass

        @tab_complete
        def first(self, caller, args):
            return ["a"]

        @tab_complete(callers=[CallerKind.PLAYER])
        def second(self, caller, args):
            return ["b"]

    table = _table(Multi())
    assert table.completion.handler_name == "second"
    assert table.completion.callers == frozenset({CallerKind.PLAYER})


def test_named_bindings_are_read_only():
    table = _table(WarpCommand())
    with pytest.raises(TypeError):
        table.named["new"] = table.default


# --- Markers ---


def test_command_marker_is_not_inherited():
    class SubWarp(WarpCommand):
        pass

    assert get_command_marker(WarpCommand).name == "warp"
    assert get_command_marker(SubWarp) is None


def test_class_permission_marker():
    requirement = get_class_permission(AdminCommand)
    assert requirement.key == "admin.use"
    assert requirement.message == "§cAdmins only."
    assert get_class_permission(WarpCommand) is None


def test_permission_decorator_order_does_not_matter():
    @command("order")
    class Order:
        @permission("order.a")
        @execute("a")
        def a(self, caller):
            pass

        @execute("b")
        @permission("order.b", "nope")
        def b(self, caller):
            pass

    table = _table(Order())
    assert table.named["a"].permission.key == "order.a"
    assert table.named["a"].permission.message is None
    assert table.named["b"].permission.message == "nope"


def test_callers_accept_strings():
    @command("kinds")
    class Kinds:
        @execute(callers="console")
        def run(self, caller):
            pass

    table = _table(Kinds())
    assert table.default.callers == frozenset({CallerKind.CONSOLE})
