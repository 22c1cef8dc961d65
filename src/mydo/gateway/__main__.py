"""启动入口 -- python -m mydo.gateway [host] [port]"""

import sys

import uvicorn


def main() -> None:
    host = sys.argv[1] if len(sys.argv) > 1 else "127.0.0.1"
    port = int(sys.argv[2]) if len(sys.argv) > 2 else 8000
    uvicorn.run("mydo.gateway.main:app", host=host, port=port, log_config=None)


if __name__ == "__main__":
    main()
