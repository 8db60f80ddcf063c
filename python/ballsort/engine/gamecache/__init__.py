from ballsort.engine.gamecache.cache import BoardCache, NullBoardCache, TTLBoardCache

__all__ = ["BoardCache", "NullBoardCache", "TTLBoardCache"]
