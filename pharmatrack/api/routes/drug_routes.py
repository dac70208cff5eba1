"""
Drug API routes.
Handles HTTP endpoints for listing, adding, dispensing and deleting drugs.
"""
from typing import Optional
from fastapi import APIRouter, Depends, Query, Response, status
from pharmatrack.core.dependencies import get_request_store
from pharmatrack.models.dto.drug_dto import DrugCreateRequest, DrugListResponse, DrugResponse
from pharmatrack.services.drug_service import DrugService
from pharmatrack.services.inventory_store import InventoryStore

router = APIRouter(prefix="/v1/api")


def get_drug_service(store: InventoryStore = Depends(get_request_store)) -> DrugService:
    return DrugService(store)


@router.get("/drugs", tags=["Drugs"], response_model=DrugListResponse)
async def list_drugs(
    q: Optional[str] = Query(default=None, description="Case-insensitive name filter"),
    drug_service: DrugService = Depends(get_drug_service)
):
    """
    Retrieve the inventory snapshot, newest first.

    - **q**: Optional search text matched against drug names
    """
    return drug_service.list_drugs(q)


@router.get("/drugs/{drug_id}", tags=["Drugs"], response_model=DrugResponse)
async def get_drug(
    drug_id: str,
    drug_service: DrugService = Depends(get_drug_service)
):
    """
    Retrieve a single drug by id.
    """
    return drug_service.get_drug(drug_id)


@router.post("/drugs", tags=["Drugs"], response_model=DrugResponse, status_code=status.HTTP_201_CREATED)
async def add_drug(
    request: DrugCreateRequest,
    drug_service: DrugService = Depends(get_drug_service)
):
    """
    Add a drug. Quantity and expiry date are accepted as raw text.
    """
    return drug_service.add_drug(request)


@router.post("/drugs/{drug_id}/dispense", tags=["Drugs"], status_code=status.HTTP_204_NO_CONTENT)
async def dispense_drug(
    drug_id: str,
    drug_service: DrugService = Depends(get_drug_service)
):
    """
    Dispense one unit. Unknown ids are ignored.
    """
    drug_service.dispense_drug(drug_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.delete("/drugs/{drug_id}", tags=["Drugs"], status_code=status.HTTP_204_NO_CONTENT)
async def delete_drug(
    drug_id: str,
    drug_service: DrugService = Depends(get_drug_service)
):
    """
    Remove a drug permanently. Unknown ids are ignored.
    """
    drug_service.delete_drug(drug_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
