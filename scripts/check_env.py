from dotenv import load_dotenv
import os

load_dotenv()

keys = [
    "MWS_ACCESS_KEY_ID",
    "MWS_SECRET_ACCESS_KEY",
    "MWS_SELLER_ID",
    "MWS_AUTH_TOKEN",
    "MWS_MARKETPLACE_IDS",
    "MWS_BASE_URL",
    "MWS_APPLICATION_NAME",
    "MWS_APPLICATION_VERSION",
]

for k in keys:
    print(f"{k} = ", "SET" if os.getenv(k) else "MISSING")
