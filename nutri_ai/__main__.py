"""Run the service: python -m nutri_ai (or the nutri-ai console script)."""

import uvicorn

from nutri_ai.config import NUTRI_AI_HOST, NUTRI_AI_PORT


def main():
    uvicorn.run("nutri_ai.main:app", host=NUTRI_AI_HOST, port=NUTRI_AI_PORT)


if __name__ == "__main__":
    main()
