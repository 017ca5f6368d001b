"""SyncRegistrar: binding creation, re-registration policy, and disposal."""

from unittest.mock import MagicMock

import pytest

from viewcache.application.dtos.retrieval import SyncContext
from viewcache.application.services.sync_registrar import SyncRegistrar
from viewcache.domain.enums import CollabType
from viewcache.domain.exceptions import ValidationException


def test_register_builds_scoped_context_and_starts_binding(
    binding_factory: MagicMock, document
) -> None:
    registrar = SyncRegistrar(binding_factory)

    result = registrar.register(document, "user-1", "ws1", "obj1", CollabType.DATABASE)

    assert result is None
    doc_arg, context = binding_factory.call_args.args
    assert doc_arg is document
    assert context == SyncContext(
        user_id="user-1",
        workspace_id="ws1",
        object_id="obj1",
        collab_type=CollabType.DATABASE,
    )
    assert registrar.is_registered(document, context)


def test_register_initializes_binding(document) -> None:
    binding = MagicMock()
    registrar = SyncRegistrar(lambda doc, ctx: binding)

    registrar.register(document, "user-1", "ws1", "obj1", CollabType.DOCUMENT)

    binding.initialize.assert_called_once_with()


def test_failed_start_leaves_slot_free_for_retry(document) -> None:
    broken = MagicMock()
    broken.initialize.side_effect = RuntimeError("no running event loop")
    working = MagicMock()
    factory = MagicMock(side_effect=[broken, working])
    registrar = SyncRegistrar(factory)

    with pytest.raises(RuntimeError):
        registrar.register(document, "user-1", "ws1", "obj1", CollabType.DOCUMENT)
    assert registrar.active_count == 0

    registrar.register(document, "user-1", "ws1", "obj1", CollabType.DOCUMENT)

    assert factory.call_count == 2
    assert registrar.active_count == 1
    working.initialize.assert_called_once_with()


def test_same_document_and_context_registered_once(binding_factory: MagicMock, document) -> None:
    registrar = SyncRegistrar(binding_factory)

    registrar.register(document, "user-1", "ws1", "obj1", CollabType.DOCUMENT)
    registrar.register(document, "user-1", "ws1", "obj1", CollabType.DOCUMENT)

    assert binding_factory.call_count == 1
    assert registrar.active_count == 1


def test_different_objects_get_separate_bindings(binding_factory: MagicMock, document) -> None:
    registrar = SyncRegistrar(binding_factory)

    registrar.register(document, "user-1", "ws1", "obj1", CollabType.DOCUMENT)
    registrar.register(document, "user-1", "ws1", "obj2", CollabType.DOCUMENT)

    assert registrar.active_count == 2


@pytest.mark.parametrize("missing", ["user_id", "workspace_id", "object_id"])
def test_register_rejects_empty_scope(binding_factory: MagicMock, document, missing: str) -> None:
    registrar = SyncRegistrar(binding_factory)
    values = {"user_id": "user-1", "workspace_id": "ws1", "object_id": "obj1"}
    values[missing] = ""

    with pytest.raises(ValidationException) as exc_info:
        registrar.register(document, collab_type=CollabType.DOCUMENT, **values)

    assert exc_info.value.details == {"field": missing}
    binding_factory.assert_not_called()


@pytest.mark.asyncio
async def test_unregister_closes_binding(binding_factory: MagicMock, document) -> None:
    registrar = SyncRegistrar(binding_factory)
    registrar.register(document, "user-1", "ws1", "obj1", CollabType.DOCUMENT)
    _, context = binding_factory.call_args.args

    assert await registrar.unregister(document, context) is True
    assert await registrar.unregister(document, context) is False
    assert registrar.active_count == 0


@pytest.mark.asyncio
async def test_dispose_closes_all_bindings_even_if_one_fails(document) -> None:
    bindings: list[MagicMock] = []

    def factory(doc, ctx):
        binding = MagicMock()

        async def close() -> None:
            binding.closed = True
            if ctx.object_id == "bad":
                raise RuntimeError("close failed")

        binding.close = close
        bindings.append(binding)
        return binding

    registrar = SyncRegistrar(factory)
    registrar.register(document, "user-1", "ws1", "bad", CollabType.DOCUMENT)
    registrar.register(document, "user-1", "ws1", "good", CollabType.DOCUMENT)

    await registrar.dispose()

    assert all(b.closed is True for b in bindings)
    assert registrar.active_count == 0
