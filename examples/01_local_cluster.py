"""Plain client against a local, unauthenticated OpenSearch.

No AWS credentials are looked up and no request is signed.

Run a local cluster first, e.g.:
    docker run -p 9200:9200 -e discovery.type=single-node \
        -e DISABLE_SECURITY_PLUGIN=true opensearchproject/opensearch:2
"""

import logging

from opensearch_sigv4 import connect

logging.basicConfig(level=logging.INFO)

client = connect("http://localhost:9200")


if __name__ == "__main__":
    client.index(
        index="people",
        body={"name": "John", "body": "Hello world"},
        refresh="wait_for",
    )
    result = client.search(index="people", q="Hello")
    print(result["hits"]["total"])
