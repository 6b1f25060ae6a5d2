from .mock_servers import MemorySink, MockGithubServer, MockMonitorServer, RecordedRequest, unused_local_url

__all__ = ["MemorySink", "MockGithubServer", "MockMonitorServer", "RecordedRequest", "unused_local_url"]
