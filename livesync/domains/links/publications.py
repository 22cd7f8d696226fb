from livesync.db.repositories.link_repository import LinkRepository
from livesync.domains.realtime.live_query import LiveQuery
from livesync.domains.realtime.registry import Registry


def all_links() -> LiveQuery:
    return LiveQuery("links", LinkRepository.select_all(), LinkRepository.to_document)


def register_link_publications(registry: Registry) -> None:
    registry.publication("links")(all_links)
