from .uri import URICreate, ShortURLResponse, PruneRequest, PruneResponse

__all__ = ["URICreate", "ShortURLResponse", "PruneRequest", "PruneResponse"]
