from typing import Annotated

import pytest
from pydantic import StringConstraints

from contractrpc import Result, RPCError, make_rpc


@pytest.mark.asyncio
async def test_can_try_call_procedure_without_context():
    rpc = make_rpc()
    hello = rpc.procedure.name("hello").input(str).output(str).query(
        lambda *, ctx, input: "Hello, " + input
    )

    result = await hello.callable.try_call(None, "world")
    assert result.ok is True
    assert result.value == "Hello, world"
    assert await hello.callable.call(None, "world") == "Hello, world"


@pytest.mark.asyncio
async def test_can_call_procedure_with_context():
    rpc = make_rpc()

    async def handler(*, ctx, input):
        return f"Hello, {input} on {ctx['day']}"

    hello = rpc.procedure.name("hello").input(str).output(str).query(handler)

    assert await hello.callable.call({"day": "Monday"}, "world") == "Hello, world on Monday"


@pytest.mark.asyncio
async def test_unexpected_exception_becomes_internal_server_error():
    rpc = make_rpc()
    boom = RuntimeError("something went wrong")

    def handler(*, ctx, input):
        raise boom

    hello = rpc.procedure.name("hello").input(str).output(str).query(handler)
    result = await hello.callable.try_call(None, "world")

    assert result.ok is False
    assert result.error.code == "INTERNAL_SERVER_ERROR"
    assert result.error.message == "Internal server error"
    assert result.error.cause is boom
    assert result.error.procedure == "hello"
    assert result.error.input == "world"


@pytest.mark.asyncio
async def test_taxonomy_error_keeps_kind_and_message():
    rpc = make_rpc()

    def handler(*, ctx, input):
        raise RPCError("FORBIDDEN", "Forbidden", cause="policy")

    hello = rpc.procedure.name("hello").input(str).output(str).query(handler)
    with pytest.raises(RPCError) as info:
        await hello.callable.call(None, "world")

    assert info.value.code == "FORBIDDEN"
    assert info.value.status == 403
    assert info.value.message == "Forbidden"
    assert info.value.cause == "policy"
    assert info.value.procedure == "hello"
    assert info.value.input == "world"


@pytest.mark.asyncio
async def test_invalid_input_never_reaches_middleware_or_handler():
    rpc = make_rpc()
    calls = []

    def step(*, ctx):
        calls.append("middleware")
        return ctx

    def handler(*, ctx, input):
        calls.append("handler")
        return ""

    hello = rpc.procedure.name("hello").input(str).output(str).use(step).query(handler)
    result = await hello.callable.try_call(None, 1)

    assert result.ok is False
    assert result.error.code == "PARSE_ERROR"
    assert result.error.message == "Error parsing input"
    assert result.error.issues
    assert result.error.procedure == "hello"
    assert calls == []


@pytest.mark.asyncio
async def test_invalid_output_is_a_parse_error_with_validated_input():
    rpc = make_rpc()
    hello = rpc.procedure.name("hello").input(int).output(str).query(lambda *, ctx, input: 1)

    result = await hello.callable.try_call(None, "7")

    assert result.ok is False
    assert result.error.code == "PARSE_ERROR"
    assert result.error.message == "Error parsing output"
    assert result.error.issues
    assert result.error.input == 7


@pytest.mark.asyncio
async def test_minimum_length_scenario():
    rpc = make_rpc()
    hello = (
        rpc.procedure.name("hello")
        .input(Annotated[str, StringConstraints(min_length=5)])
        .output(str)
        .query(lambda *, ctx, input: "hello " + input)
    )

    assert (await hello.callable.try_call(None, "world")).value == "hello world"
    failed = await hello.callable.try_call(None, "hi")
    assert failed.ok is False
    assert failed.error.code == "PARSE_ERROR"
    assert len(failed.error.issues) >= 1


@pytest.mark.asyncio
async def test_middleware_threads_context_sequentially():
    rpc = make_rpc()
    order = []

    async def authenticate(*, ctx):
        order.append("authenticate")
        return {**ctx, "user": "ada"}

    def authorize(*, ctx):
        order.append("authorize")
        return {**ctx, "role": "admin" if ctx["user"] == "ada" else "guest"}

    whoami = (
        rpc.procedure.name("whoami")
        .use(authenticate)
        .use(authorize)
        .output(str)
        .query(lambda *, ctx, input: f"{ctx['user']}:{ctx['role']}:{ctx['seed']}")
    )

    assert await whoami.callable.call({"seed": 1}, None) == "ada:admin:1"
    assert order == ["authenticate", "authorize"]


@pytest.mark.asyncio
async def test_failing_middleware_is_returned_as_value_by_try_call():
    rpc = make_rpc()

    def deny(*, ctx):
        raise RPCError("UNAUTHORIZED", "Who are you?")

    def explode(*, ctx):
        raise KeyError("session")

    denied = rpc.procedure.name("denied").use(deny).query(lambda *, ctx, input: None)
    broken = rpc.procedure.name("broken").use(explode).query(lambda *, ctx, input: None)

    assert (await denied.callable.try_call(None, None)).error.code == "UNAUTHORIZED"
    assert (await broken.callable.try_call(None, None)).error.code == "INTERNAL_SERVER_ERROR"


@pytest.mark.asyncio
async def test_error_tap_observes_classified_error():
    rpc = make_rpc()
    seen = []

    def handler(*, ctx, input):
        raise ValueError("nope")

    hello = rpc.procedure.name("hello").tap_on_error(seen.append).query(handler)
    result = await hello.callable.try_call(None, None)

    assert seen == [result.error]
    assert seen[0].code == "INTERNAL_SERVER_ERROR"
    assert seen[0].procedure == "hello"


@pytest.mark.asyncio
async def test_failing_error_tap_does_not_change_the_error():
    rpc = make_rpc()

    def bad_tap(error):
        raise RuntimeError("tap exploded")

    def handler(*, ctx, input):
        raise RPCError("CONFLICT", "Already exists")

    hello = rpc.procedure.name("hello").tap_on_error(bad_tap).mutation(handler)
    result = await hello.callable.try_call(None, None)

    assert result.error.code == "CONFLICT"
    assert result.error.message == "Already exists"


@pytest.mark.asyncio
async def test_error_tap_is_not_called_for_validation_failures():
    rpc = make_rpc()
    seen = []
    hello = rpc.procedure.name("hello").input(str).tap_on_error(seen.append).query(lambda *, ctx, input: None)

    await hello.callable.try_call(None, 5)
    assert seen == []


@pytest.mark.asyncio
async def test_mocked_procedure_bypasses_schema_and_middleware():
    rpc = make_rpc()

    def step(*, ctx):
        raise AssertionError("middleware must not run")

    builder = rpc.procedure.name("hello").input(str).output(str).use(step)
    real = builder.name("real").query(lambda *, ctx, input: "hello " + str(input))
    mocked = builder.mock(lambda input: "hello " + str(input))

    assert await mocked.callable.call(None, "world") == "hello world"
    assert (await real.callable.try_call(None, "world")).error.code == "INTERNAL_SERVER_ERROR"

    result = await mocked.callable.try_call(None, 42)
    assert result.ok is True
    assert result.value == "hello 42"


@pytest.mark.asyncio
async def test_mocked_procedure_failures_are_classified_by_try_call():
    rpc = make_rpc()

    async def handler(input):
        raise LookupError("missing")

    mocked = rpc.procedure.name("hello").mock(handler)
    result = await mocked.callable.try_call(None, "x")

    assert result.error.code == "INTERNAL_SERVER_ERROR"
    assert isinstance(result.error.cause, LookupError)
    with pytest.raises(LookupError):
        await mocked.callable.call(None, "x")


def test_result_unwrap():
    assert Result.success(3).unwrap() == 3
    error = RPCError("CONFLICT", "taken")
    with pytest.raises(RPCError) as info:
        Result.failure(error).unwrap()
    assert info.value is error
    with pytest.raises(ValueError, match="no error"):
        Result(ok=False).unwrap()
