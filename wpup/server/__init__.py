from wpup.server.request import UpdateRequest
from wpup.server.request_log import RequestLog, anonymize_ip
from wpup.server.update_server import UpdateServer, add_query_arg

__all__ = ["UpdateRequest", "RequestLog", "anonymize_ip", "UpdateServer", "add_query_arg"]
