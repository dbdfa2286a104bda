"""Entry point for running the service as module: python -m rewards_distributor"""

# Load .env file before importing anything else
from dotenv import load_dotenv
load_dotenv()

from rewards_distributor.main import main

if __name__ == "__main__":
    main()
