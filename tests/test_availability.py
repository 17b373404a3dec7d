import pytest

from menu_service.errors import ErrorKind, FoodItemNotFoundError, InvalidStateError
from menu_service.schemas.food_item import FoodItem, FoodItemPayload
from menu_service.services.availability import Availability, Transition, apply_transition


def test_order_moves_available_item_to_unavailable() -> None:
    item = FoodItem(id=3, name="Tea", available=True)

    ordered = apply_transition(item, Transition.ORDER)

    assert Availability.of(ordered) is Availability.UNAVAILABLE
    assert ordered.model_dump(exclude={"available"}) == item.model_dump(exclude={"available"})
    assert item.available is True


def test_illegal_transitions_raise_invalid_state() -> None:
    available = FoodItem(id=1, available=True)
    unavailable = FoodItem(id=2, available=False)

    with pytest.raises(InvalidStateError) as exc_info:
        apply_transition(available, Transition.RECEIVE)
    assert exc_info.value.kind is ErrorKind.INVALID_STATE
    assert exc_info.value.transition == "receive"

    with pytest.raises(InvalidStateError) as exc_info:
        apply_transition(unavailable, Transition.ORDER)
    assert str(exc_info.value) == "couldn't order a food item with id=2. item not available for order"


@pytest.mark.anyio
async def test_order_twice_fails_the_second_time(service) -> None:
    item = await service.add(FoodItemPayload(name="Pizza", description="cheese", price=9.5))

    assert await service.order(item.id) is None
    assert (await service.get(item.id)).available is False

    with pytest.raises(InvalidStateError) as exc_info:
        await service.order(item.id)
    assert exc_info.value.item_id == item.id
    assert (await service.get(item.id)).available is False


@pytest.mark.anyio
async def test_receive_twice_fails_the_second_time(service) -> None:
    item = await service.add(FoodItemPayload(name="Pizza", description="cheese", price=9.5))

    with pytest.raises(InvalidStateError):
        await service.receive(item.id)

    await service.order(item.id)
    await service.receive(item.id)
    assert (await service.get(item.id)).available is True

    with pytest.raises(InvalidStateError):
        await service.receive(item.id)


@pytest.mark.anyio
async def test_transitions_on_missing_item_raise_not_found(service) -> None:
    with pytest.raises(FoodItemNotFoundError) as exc_info:
        await service.order(99)
    assert str(exc_info.value) == "couldn't order a food item with id=99. item not found"

    with pytest.raises(FoodItemNotFoundError) as exc_info:
        await service.receive(99)
    assert exc_info.value.action == "receive"


@pytest.mark.anyio
async def test_transitions_leave_other_fields_untouched(service) -> None:
    item = await service.add(FoodItemPayload(name="Pizza", description="cheese", price=9.5))

    await service.order(item.id)
    await service.receive(item.id)

    assert await service.get(item.id) == item
