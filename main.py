import asyncio

from web3 import HTTPProvider, Web3

import settings
from data.const import CHAIN_MAPPING
from modules.exceptions import AirdropError, ChunkConfigurationError
from modules.export import BatchFileHost
from modules.logger import configure_logging, logger
from modules.questionary import (
    EXIT,
    RELOAD,
    SUBMIT_ALL,
    ask_chunking,
    build_chunk_table,
    build_issues_table,
    build_summary_table,
    confirm_submission,
    select_batch,
)
from modules.session import AirdropSession
from modules.token import TokenInfoProvider
from modules.utils import read_lines, sleep
from modules.wallet import SafeWallet


def build_host(chain):
    if settings.EXPORT_ONLY:
        return BatchFileHost(settings.EXPORT_DIR, chain, settings.SAFE_ADDRESS)

    keys = read_lines(settings.KEYS_FILE)
    return SafeWallet(keys[0], settings.SAFE_ADDRESS, chain=chain)


def load(session: AirdropSession) -> None:
    result = session.load_csv(settings.CSV_PATH)

    if result.errors or result.warnings:
        print(build_issues_table(result))
        print()


def submit(session: AirdropSession, host, indexes: list[int]) -> None:
    for count, index in enumerate(indexes, start=1):
        try:
            asyncio.run(session.submit(index, host))
        except AirdropError as err:
            logger.error(str(err))
            continue

        if count < len(indexes):
            sleep(*settings.SLEEP_BETWEEN_CHUNKS)


def main():
    configure_logging(log_file=settings.LOG_FILE)

    chain = CHAIN_MAPPING.get(settings.CHAIN)
    if not chain:
        logger.error(f"Unknown chain {settings.CHAIN}, expected one of {', '.join(CHAIN_MAPPING)}")
        exit(1)

    if not settings.SAFE_ADDRESS:
        logger.error("Set SAFE_ADDRESS in settings.py")
        exit(1)

    host = build_host(chain)
    w3 = host.w3 if isinstance(host, SafeWallet) else Web3(HTTPProvider(chain.rpc_url))

    session = AirdropSession(
        TokenInfoProvider(w3, chain),
        sender=Web3.to_checksum_address(settings.SAFE_ADDRESS),
        max_chunk_size=settings.MAX_CHUNK_SIZE,
        decrementing=settings.DECREMENT_CHUNK_SIZE,
        placement=settings.COLLECTIBLE_PLACEMENT,
    )

    load(session)

    while True:
        if not session.transfers:
            logger.warning(f"No valid transfers in {settings.CSV_PATH}")
            return

        print(build_summary_table(session, chain))
        print(build_chunk_table(session))

        if not session.pending():
            logger.success("All chunks submitted! 🎉")
            return

        action = select_batch(session)

        if action == EXIT:
            return

        if action == RELOAD:
            try:
                session.set_chunking(*ask_chunking(session))
                load(session)
            except ChunkConfigurationError as err:
                logger.error(str(err))
            continue

        indexes = session.pending() if action == SUBMIT_ALL else [action]
        if confirm_submission(len(indexes)):
            submit(session, host, indexes)


def run():
    try:
        main()
    except ChunkConfigurationError as err:
        logger.error(str(err))
        exit(1)
    except KeyboardInterrupt:
        logger.warning("Cancelled by the user")
        exit(0)


if __name__ == "__main__":
    run()
