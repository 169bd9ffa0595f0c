"""
Terminal client for a running Ruggy API.

Usage:
    ruggy-chat --url http://localhost:3000 --agent Ruggy
"""

import argparse
import uuid

import httpx


class Colors:
    BLUE = "\033[94m"
    GREEN = "\033[92m"
    YELLOW = "\033[93m"
    RED = "\033[91m"
    BOLD = "\033[1m"
    END = "\033[0m"


def check_server(client: httpx.Client) -> bool:
    try:
        response = client.get("/health", timeout=5)
    except httpx.ConnectError:
        print(f"{Colors.RED}[ERROR] Server not reachable at {client.base_url}{Colors.END}")
        print(f"{Colors.YELLOW}Start it first: python run.py{Colors.END}")
        return False
    if response.status_code != 200:
        print(f"{Colors.RED}[ERROR] Health check returned {response.status_code}{Colors.END}")
        return False
    print(f"{Colors.GREEN}[OK] Connected to {client.base_url}{Colors.END}")
    return True


def send(client: httpx.Client, agent: str, text: str, user_id: str, user_name: str) -> list[dict]:
    payload = {"text": text, "user_id": user_id, "user_name": user_name, "room_id": user_id}
    response = client.post(f"/{agent}/message", json=payload, timeout=120)
    response.raise_for_status()
    return response.json()


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Chat with a Ruggy agent from the terminal")
    parser.add_argument("--url", default="http://localhost:3000", help="Server URL")
    parser.add_argument("--agent", default="Ruggy", help="Agent name")
    parser.add_argument("--user", default=f"cli-{uuid.uuid4().hex[:8]}", help="User id")
    parser.add_argument("--name", default="You", help="Display name")
    args = parser.parse_args(argv)

    with httpx.Client(base_url=args.url) as client:
        if not check_server(client):
            return 1
        print(f"{Colors.YELLOW}Type 'exit' to quit{Colors.END}\n")
        while True:
            try:
                text = input(f"{Colors.BLUE}{Colors.BOLD}{args.name}:{Colors.END} ").strip()
            except (EOFError, KeyboardInterrupt):
                print()
                break
            if not text:
                continue
            if text.lower() == "exit":
                break
            try:
                replies = send(client, args.agent, text, args.user, args.name)
            except httpx.TimeoutException:
                print(f"{Colors.RED}Timeout waiting for a reply{Colors.END}")
                continue
            except httpx.HTTPError as exc:
                print(f"{Colors.RED}Error: {exc}{Colors.END}")
                continue
            for reply in replies:
                print(f"{Colors.GREEN}{Colors.BOLD}{args.agent}:{Colors.END} {reply.get('text', '')}")
            print()
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
