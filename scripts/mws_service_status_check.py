from __future__ import annotations

import logging
import sys

from dotenv import load_dotenv

from mws_client import MwsClient


def main() -> None:
    load_dotenv()
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s")

    path = sys.argv[1] if len(sys.argv) > 1 else "/Sellers/2011-07-01"
    with MwsClient.from_env() as client:
        resp = client.send("GetServiceStatus", path)

    if resp.is_document:
        print(f"MWS signed call OK ({resp.root_name}):")
        print(resp.parsed)
    else:
        print("MWS returned non-XML body:")
        print(resp.text)


if __name__ == "__main__":
    main()
