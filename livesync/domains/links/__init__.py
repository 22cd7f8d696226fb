from livesync.domains.links.entities import Link

__all__ = ["Link"]
