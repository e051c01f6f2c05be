import os
from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()


class Config:
    # Directory structure
    DATA_DIR = os.getenv('DISTRIBUTOR_DATA_DIR', 'data')
    MERKLE_DIR = f'{DATA_DIR}/merkle'
    SOURCES_DIR = f'{DATA_DIR}/sources'

    # Source data files
    LEAVES_FILE = f'{SOURCES_DIR}/leaves.json'

    # Widths of identities and commitments
    HASH_BYTES = 32
    AMOUNT_BYTES = 8

    @classmethod
    def get_merkle_file(cls, name: str) -> str:
        """Returns the path to a merkle distribution file for a given drop name"""
        return f'{cls.MERKLE_DIR}/merkle_data_{name}.json'
