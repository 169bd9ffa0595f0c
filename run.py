import os

import uvicorn

if __name__ == "__main__":
    uvicorn.run(
        "ruggy.app:app_factory",
        factory=True,
        host=os.getenv("HOST", "0.0.0.0"),
        port=int(os.getenv("PORT", "3000")),
        reload=os.getenv("RELOAD", "false").lower() == "true",
    )
