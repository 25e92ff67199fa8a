from procurement.domain.tender import Tender
from procurement.repositories.base import BaseRepository


class TenderRepository(BaseRepository[Tender]):
    model = Tender
    search_columns = ("title", "description")
