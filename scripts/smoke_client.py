import os
import sys
import json
import requests

BASE_URL = os.environ.get("SMOKE_URL") or os.environ.get("DEV_URL", "http://127.0.0.1:5002")
API = f"{BASE_URL.rstrip('/')}/api"
HEADERS = {"X-API-Key": os.environ["API_KEY"]} if os.environ.get("API_KEY") else {}

def get(path: str):
    r = requests.get(f"{API}{path}", headers=HEADERS, timeout=10)
    r.raise_for_status()
    return r

def post(path: str, payload: dict):
    r = requests.post(f"{API}{path}", json=payload, headers=HEADERS, timeout=20)
    r.raise_for_status()
    return r

def main():
    print(f"[smoke] Target: {API}")
    print("[smoke] /health:", get("/health").status_code)
    print("[smoke] /version:", get("/version").status_code)
    tools = get("/tools").json().get("tools", [])
    print("[smoke] /tools:", [t["name"] for t in tools])

    r = post("/tools/validate_citation", {"citation": "Code de la défense, art. L. 2321-1"})
    print("[smoke] validate_citation:", r.status_code, r.json()["results"].get("valid"))

    r = post("/tools/format_citation", {"citation": "Code pénal, art. 323-1", "format": "short"})
    print("[smoke] format_citation:", r.status_code, r.json()["results"].get("formatted"))

    r = post("/search", {"query": "traitement automatisé", "limit": 3})
    print("[smoke] /search:", r.status_code, json.dumps(r.json(), indent=2, ensure_ascii=False)[:300])

if __name__ == "__main__":
    try:
        main()
    except Exception as e:
        print("[smoke] FAILED:", e)
        sys.exit(1)
