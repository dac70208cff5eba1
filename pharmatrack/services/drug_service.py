"""
Drug Service for the presentation boundary.
Maps inventory store state to response DTOs for the API.
"""
from datetime import datetime
from typing import Optional
from pharmatrack.core.exceptions import DrugNotFoundException
from pharmatrack.models.drug_model import DrugRecord
from pharmatrack.models.dto.drug_dto import DrugCreateRequest, DrugListResponse, DrugResponse
from pharmatrack.services import expiry_classifier
from pharmatrack.services.inventory_store import InventoryStore


class DrugService:
    """Service for drug-related read and write operations."""

    def __init__(self, inventory_store: InventoryStore):
        self.inventory_store = inventory_store

    def list_drugs(self, query: Optional[str] = None) -> DrugListResponse:
        """
        Return the current snapshot with derived flags.

        Args:
            query: Optional case-insensitive name filter

        Returns:
            DrugListResponse; count reflects the filtered list, critical_count
            the whole inventory
        """
        now = self.inventory_store.clock()
        drugs = [self._to_response(record, now) for record in self.inventory_store.search(query)]
        return DrugListResponse(
            drugs=drugs,
            count=len(drugs),
            critical_count=self.inventory_store.critical_count(now),
            loaded=self.inventory_store.loaded
        )

    def get_drug(self, drug_id: str) -> DrugResponse:
        """
        Retrieve one drug.

        Raises:
            DrugNotFoundException: If no record has this id
        """
        record = self.inventory_store.get_drug(drug_id)
        if record is None:
            raise DrugNotFoundException(f"Drug '{drug_id}' not found")
        return self._to_response(record, self.inventory_store.clock())

    def add_drug(self, request: DrugCreateRequest) -> DrugResponse:
        """
        Add a drug from raw form input.

        Raises:
            ValidationException: If the input is rejected
        """
        record = self.inventory_store.add_drug(request.name, request.quantity, request.expiry_date)
        return self._to_response(record, self.inventory_store.clock())

    def dispense_drug(self, drug_id: str) -> None:
        self.inventory_store.dispense_drug(drug_id)

    def delete_drug(self, drug_id: str) -> None:
        self.inventory_store.delete_drug(drug_id)

    def _to_response(self, record: DrugRecord, now: datetime) -> DrugResponse:
        store = self.inventory_store
        return DrugResponse(
            id=record.id,
            name=record.name,
            quantity=record.quantity,
            expiry_date=record.expiry_date,
            added_at=record.added_at,
            status=store.classify(record, now),
            days_until_expiry=expiry_classifier.days_until_expiry(record.expiry_date, now, store.timezone),
            is_low_stock=store.is_low_stock(record),
            is_out_of_stock=expiry_classifier.is_out_of_stock(record),
            expiry_label=expiry_classifier.expiry_label(record, now, store.timezone)
        )
