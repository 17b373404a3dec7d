from fastapi import APIRouter, Depends, Query, Request, Response, status

from menu_service.schemas.food_item import FoodItem, FoodItemRequest
from menu_service.services.menu_service import MenuService

router = APIRouter()


def get_menu_service(request: Request) -> MenuService:
    return request.app.state.menu_service


@router.post("", response_model=FoodItem, status_code=status.HTTP_201_CREATED)
async def add_food_item(
    body: FoodItemRequest,
    service: MenuService = Depends(get_menu_service),
) -> FoodItem:
    return await service.add(body)


@router.get("", response_model=list[FoodItem])
async def get_menu(service: MenuService = Depends(get_menu_service)) -> list[FoodItem]:
    return await service.list_all()


@router.get("/search/name", response_model=list[FoodItem])
async def search_by_name(
    q: str = Query(..., description="Case-sensitive substring of the item name"),
    service: MenuService = Depends(get_menu_service),
) -> list[FoodItem]:
    return await service.search_by_name(q)


@router.get("/search/price-at-most", response_model=list[FoodItem])
async def search_by_price_at_most(
    threshold: float,
    service: MenuService = Depends(get_menu_service),
) -> list[FoodItem]:
    return await service.search_by_price_at_most(threshold)


@router.get("/search/price-at-least", response_model=list[FoodItem])
async def search_by_price_at_least(
    threshold: float,
    service: MenuService = Depends(get_menu_service),
) -> list[FoodItem]:
    return await service.search_by_price_at_least(threshold)


@router.get("/{item_id}", response_model=FoodItem)
async def get_food_item(
    item_id: int,
    service: MenuService = Depends(get_menu_service),
) -> FoodItem:
    return await service.get(item_id)


@router.put("/{item_id}", response_model=FoodItem)
async def update_food_item(
    item_id: int,
    body: FoodItemRequest,
    service: MenuService = Depends(get_menu_service),
) -> FoodItem:
    return await service.update(item_id, body)


@router.delete("/{item_id}", response_model=FoodItem)
async def delete_food_item(
    item_id: int,
    service: MenuService = Depends(get_menu_service),
) -> FoodItem:
    return await service.delete(item_id)


@router.post("/{item_id}/order", status_code=status.HTTP_204_NO_CONTENT)
async def order_food_item(
    item_id: int,
    service: MenuService = Depends(get_menu_service),
) -> Response:
    await service.order(item_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post("/{item_id}/receive", status_code=status.HTTP_204_NO_CONTENT)
async def receive_food_item(
    item_id: int,
    service: MenuService = Depends(get_menu_service),
) -> Response:
    await service.receive(item_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
