import questionary
from questionary import Style
from tabulate import tabulate

from models.network import Network
from modules.logger import logger
from modules.parser import ParseResult
from modules.session import AirdropSession
from modules.tracker import ChunkState
from modules.units import from_wei
from modules.utils import truncate

"""
This module provides an interactive CLI using
`questionary` for user prompts &
`tabulate` for summary and chunk tables.
"""

# ANSI color codes
BRIGHT_GREEN = "\033[92m"  # Bright green
YELLOW = "\033[93m"
RED = "\033[91m"
RESET = "\033[0m"  # Reset color

STATE_COLORS = {
    ChunkState.PENDING: RESET,
    ChunkState.SUBMITTING: YELLOW,
    ChunkState.SUBMITTED: BRIGHT_GREEN,
    ChunkState.FAILED: RED,
}

SUBMIT_ALL = "all"
RELOAD = "reload"
EXIT = "exit"

style = Style(
    [
        ("qmark", "fg:#2196f3 bold"),
        ("question", "bold"),
        ("answer", "fg:#2196f3 bold"),
        ("pointer", "fg:#673ab7 bold"),
        ("highlighted", "fg:#673ab7 bold"),
        ("selected", "fg:#cc5454"),
        ("instruction", "fg:#8c8c8c italic"),
    ]
)


def build_issues_table(result: ParseResult) -> str:
    """
    Rows that were skipped or had their amount truncated.
    """
    table_data = [[index + 1, f"{RED}error{RESET}", err.message] for index, err in result.errors]
    table_data += [[index + 1, f"{YELLOW}warning{RESET}", str(w)] for index, w in result.warnings]
    table_data.sort(key=lambda row: row[0])

    return tabulate(table_data, headers=["Row", "Level", "Message"], tablefmt="double_grid")


def build_totals(session: AirdropSession) -> list[str]:
    totals: dict[str | None, int] = {}
    for transfer in session.asset_transfers:
        totals[transfer.token_address] = totals.get(transfer.token_address, 0) + transfer.amount

    token_info = session.token_info
    return [
        f"{from_wei(amount, token_info.decimals(token)).normalize():f} {token_info.symbol(token)}"
        for token, amount in totals.items()
    ]


def build_summary_table(session: AirdropSession, chain: Network) -> str:
    table_data = [
        ["Asset transfers", len(session.asset_transfers)],
        ["Collectible transfers", len(session.collectible_transfers)],
        ["Chunking", f"{'decrementing' if session.decrementing else 'fixed'} from {session.max_chunk_size}"],
        ["Batches", session.batch_count],
        ["Total", "\n".join(build_totals(session)) or "-"],
        ["From", truncate(session.sender)],
        ["Chain", f"{BRIGHT_GREEN}{chain.name.upper()}{RESET}"],
    ]

    return tabulate(table_data, tablefmt="double_grid")


def build_chunk_table(session: AirdropSession) -> str:
    table_data = []

    for index in range(session.batch_count):
        chunk = session.chunk(index)
        collectibles = len(session.collectible_transfers) if index == session.collectible_batch else 0
        state = session.tracker.display_state(index)

        table_data.append(
            [
                index + 1,
                f"{len(chunk)} transfers" + (f" + {collectibles} collectibles" if collectibles else ""),
                truncate(chunk[0].receiver) if chunk else "-",
                truncate(chunk[-1].receiver) if chunk else "-",
                f"{STATE_COLORS[state]}{state.value}{RESET}",
            ]
        )

    return tabulate(
        table_data,
        headers=["#", "N transfers", "First Address", "Last Address", "Status"],
        tablefmt="double_grid",
    )


def ask_chunking(session: AirdropSession) -> tuple[int, bool]:
    decrementing = questionary.confirm(
        "Decrement chunk size?", default=session.decrementing, style=style
    ).ask()

    max_chunk = questionary.select(
        "Select chunk size:",
        choices=["400", "200"],
        default=str(session.max_chunk_size) if session.max_chunk_size in (200, 400) else None,
        style=style,
    ).ask()

    if decrementing is None or max_chunk is None:
        exit(0)

    return int(max_chunk), decrementing


def select_batch(session: AirdropSession) -> int | str:
    pending = session.pending()

    choices = [questionary.Choice(title=f"Submit chunk {i + 1}", value=i) for i in pending]
    if len(pending) > 1:
        choices.append(questionary.Choice(title="Submit all pending chunks", value=SUBMIT_ALL))
    choices += [
        questionary.Choice(title="Reload CSV", value=RELOAD),
        questionary.Choice(title="Exit", value=EXIT),
    ]

    action = questionary.select("Select action:", choices=choices, style=style).ask()
    return EXIT if action is None else action


def confirm_submission(count: int) -> bool:
    print()  # line break
    confirmation = questionary.confirm(
        f"Submit {count} batch{'es' if count > 1 else ''}? \n", style=style
    ).ask()

    if not confirmation:
        logger.warning("Submission skipped")
    return bool(confirmation)
