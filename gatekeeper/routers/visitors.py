"""Visitor registry endpoints — list, look up, add and remove permitted plates."""

from fastapi import APIRouter, Depends, status
from gatekeeper.exceptions import PlateNotFoundError
from gatekeeper.schemas.visitor import VisitorIn, VisitorOut
from gatekeeper.services.visitor_service import VisitorRegistry, get_registry
from gatekeeper.utils.logger import get_logger

router = APIRouter()
logger = get_logger(__name__)


@router.get("/visitors", response_model=list[VisitorOut], summary="List all permitted visitors")
def list_visitors(registry: VisitorRegistry = Depends(get_registry)):
    return registry.list_visitors()


@router.get("/visitors/{plate}", response_model=list[VisitorOut], summary="Look up a plate")
def get_visitor(plate: str, registry: VisitorRegistry = Depends(get_registry)):
    results = registry.list_visitors(plate)
    if not results:
        raise PlateNotFoundError()
    return results


@router.post("/visitors", response_model=VisitorOut, status_code=status.HTTP_201_CREATED,
             summary="Permit a new plate")
def add_visitor(body: VisitorIn, registry: VisitorRegistry = Depends(get_registry)):
    """
    Example request body:

        {"name": "Jordy", "plate": "ABC-123"}

    400 if name or plate is empty, 409 if the plate is already registered.
    """
    return registry.register(body)


@router.delete("/visitors/{plate}", summary="Remove a plate")
def remove_visitor(plate: str, registry: VisitorRegistry = Depends(get_registry)):
    if not registry.exists_by_plate(plate):
        logger.info(f"Tried to delete plate {plate} but it is not found in the database")
        raise PlateNotFoundError()
    registry.delete_by_plate(plate)
    return {"message": "Plate removed"}
