"""SigV4-signed client for Amazon OpenSearch Service.

Credentials come from the default botocore chain (env vars,
~/.aws/credentials, IAM role). The region is taken from the endpoint
hostname when it follows the usual <domain>.<region>.es.amazonaws.com form.

Credentials are resolved once, when the client is built. Temporary
credentials are not refreshed: build a new client once they expire.
"""

import logging

from opensearch_sigv4 import connect

logging.basicConfig(level=logging.INFO)

ENDPOINT = "https://search-people-abc123.us-east-1.es.amazonaws.com"

# Keyword form
client = connect(ENDPOINT, auth="sigv4")

# Explicit form, with a named profile and pass-through options
# from opensearch_sigv4 import ClientConfig, CredentialSource, build_client
#
# client = build_client(
#     ENDPOINT,
#     ClientConfig(auth="sigv4", region="us-east-1", options={"timeout": 30}),
#     credential_source=CredentialSource(profile="search"),
# )


if __name__ == "__main__":
    index = "people"
    try:
        client.indices.create(index=index)
        client.index(index=index, body={"name": "John", "body": "Hello world"}, refresh="wait_for")
        client.index(index=index, body={"name": "Joe", "body": "Lorem ipsum"}, refresh="wait_for")

        result = client.search(index=index, q="Hello")
        print(result["hits"]["total"]["value"])
    finally:
        client.indices.delete(index=index)

    # What happens under the hood:
    #
    # 1. build_client() sees auth="sigv4" and resolves credentials once
    # 2. OpenSearch is created with connection_class=SignedConnection
    # 3. Every request is signed over its real method, path, headers and body:
    #    - Authorization: AWS4-HMAC-SHA256 Credential=...
    #    - X-Amz-Date: 20240101T000000Z
    #    - X-Amz-Security-Token: ... (if using temporary credentials)
    # 4. The signed request is sent over https to port 443
