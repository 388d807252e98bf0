from __future__ import annotations

from dotenv import load_dotenv

from mws_client.config import load_mws_config, mask


def main() -> None:
    load_dotenv()  # Loads .env from project root

    cfg = load_mws_config()
    creds = cfg.credentials

    print("MWS config loaded")
    print(f"base_url: {cfg.base_url}")
    print(f"marketplace_ids: {', '.join(cfg.marketplace_ids)}")
    print(f"access_key: {mask(creds.access_key)}")
    print(f"seller_id: {mask(creds.seller_id)}")
    print(f"auth_token: {mask(creds.auth_token)}")


if __name__ == "__main__":
    main()
