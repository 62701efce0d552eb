"""
服务层异常定义。

所有排行榜构建失败都以 ServiceError 子类抛出，由 main.py 中注册的异常处理器
统一转换为 HTTP 响应：
- DataSourceUnavailable   -> 503（数据库读写失败，构建中止，不会部分写入）
- InconsistentAggregate   -> 500（每日明细之和与总步数不一致，视为致命错误）
- ConcurrentBuildConflict -> 409（等待同一周的构建锁超时，调用方可稍后重试）
- LeaderboardBuildTimeout -> 504（聚合超过 BUILD_TIMEOUT）
"""


class ServiceError(Exception):
    status_code = 500

    def __init__(self, code="SERVICE_ERROR", message="Service error", details=None):
        self.code = code
        self.message = message
        self.details = details or {}
        super().__init__(message)


class DataSourceUnavailable(ServiceError):
    status_code = 503

    def __init__(self, message="数据源不可用", details=None):
        super().__init__("DATA_SOURCE_UNAVAILABLE", message, details)


class InconsistentAggregate(ServiceError):
    status_code = 500

    def __init__(self, message="每日明细与总步数不一致", details=None):
        super().__init__("INCONSISTENT_AGGREGATE", message, details)


class ConcurrentBuildConflict(ServiceError):
    status_code = 409

    def __init__(self, message="该周排行榜正在生成中，请稍后重试", details=None, retry_after: int = 1):
        self.retry_after = retry_after
        super().__init__("CONCURRENT_BUILD_CONFLICT", message, details)


class LeaderboardBuildTimeout(ServiceError):
    status_code = 504

    def __init__(self, message="排行榜生成超时", details=None):
        super().__init__("BUILD_TIMEOUT", message, details)
