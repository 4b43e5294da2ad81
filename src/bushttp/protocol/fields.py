"""Protocol constants.

Keep these in one place to avoid stringly-typed message handling.
"""

# Request headers
ACCEPT = "Accept"
USER_AGENT = "User-Agent"
METHOD = "Method"
URL = "URL"

# Response headers
STATUS = "Status"
CONTENT_LENGTH = "Content-Length"
CONTENT_TYPE = "Content-Type"
ALLOW = "Allow"

# Methods
GET = "GET"
HEAD = "HEAD"

DEFAULT_ACCEPT = "*/*"
DEFAULT_PATH = "/"

# Prefix of ephemeral reply subjects
INBOX = "_INBOX"
