"""Unit tests for ToolRegistry and result rendering."""

from helm.agent import ToolRegistry, render_operations, render_result
from helm.types import Invocation, InvocationResult, SessionContext, ToolSpec


def _inv(name, id="tc_1", **arguments):
    return Invocation(id=id, name=name, arguments=arguments)


class TestToolRegistry:
    def test_register_and_list(self):
        reg = ToolRegistry()
        spec = reg.register("ping", lambda args, ctx: "pong", "health check")
        assert spec == ToolSpec("ping", "health check")
        assert reg.list() == [spec]
        assert "ping" in reg
        assert len(reg) == 1
        assert reg.get("missing") is None

    def test_decorator_uses_docstring(self):
        reg = ToolRegistry()

        @reg.tool()
        async def get_weather(args, ctx):
            """Current weather for a city."""
            return {}

        assert reg.list() == [ToolSpec("get_weather", "Current weather for a city.")]

    async def test_sync_and_async_handlers(self):
        reg = ToolRegistry()
        reg.register("double", lambda args, ctx: args["x"] * 2)

        async def greet(args, ctx):
            return f"hi {ctx.user_id}"

        reg.register("greet", greet)
        ctx = SessionContext(user_id="ana")

        results = await reg([_inv("double", "a", x=2), _inv("greet", "b")], ctx)

        assert [(r.invocation_id, r.result) for r in results] == [("a", 4), ("b", "hi ana")]
        assert all(r.ok for r in results)

    async def test_unknown_operation(self):
        result = await ToolRegistry().execute(_inv("nope"))
        assert not result.ok
        assert result.error == "Tool 'nope' not found"

    async def test_handler_exception_isolated(self):
        reg = ToolRegistry()

        def explode(args, ctx):
            raise ValueError("bad city")

        reg.register("explode", explode)
        reg.register("ok", lambda args, ctx: 1)

        results = await reg([_inv("explode", "a"), _inv("ok", "b")], SessionContext())

        assert results[0].error == "bad city"
        assert results[1].result == 1

    async def test_handler_gets_copy_of_arguments(self):
        reg = ToolRegistry()

        def mutate(args, ctx):
            args["x"] = 99
            return args

        reg.register("mutate", mutate)
        inv = _inv("mutate", x=1)
        await reg.execute(inv)
        assert inv.arguments == {"x": 1}


class TestRendering:
    def test_result_json(self):
        text = render_result(InvocationResult("a", "op", result={"x": [1, 2]}))
        assert text == 'Tool op result:\n{\n  "x": [\n    1,\n    2\n  ]\n}'

    def test_error(self):
        assert render_result(InvocationResult("a", "op", error="boom")) == "Tool op error: boom"

    def test_operations_block(self):
        block = render_operations([ToolSpec("a", "first"), ToolSpec("b", "second")])
        assert block.startswith("Available tools:\n- a: first\n- b: second\n")
        assert '{"name": "tool_name", "arguments": {"arg1": "value1"}}' in block
