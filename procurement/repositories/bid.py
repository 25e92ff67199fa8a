from procurement.domain.bid import Bid
from procurement.repositories.base import BaseRepository


class BidRepository(BaseRepository[Bid]):
    model = Bid
    conflict_message = "This vendor has already submitted a bid for this tender"
