"""Interactive resolution of a search term to a single process"""

import re
from typing import Callable, List, Optional

from .models import ProcessRef
from .processes import ProcessQuery, process_query
from .errors import NoMatch, InvalidSelection, SelectionCancelled, SelectionExhausted
from . import ui


NUMERIC = re.compile(r'[0-9]+')


def is_numeric(value: str) -> bool:
    """True for plain ASCII digit strings like '12345'"""
    return NUMERIC.fullmatch(value) is not None


class ProcessSelector:
    """
    Resolves a search term to exactly one process

    A single match resolves straight away. Several matches are listed and
    the user either picks a row number or types a new term, which starts a
    completely fresh search. If that search finds nothing the previous list
    stays on offer.
    """

    def __init__(
        self,
        query: Optional[ProcessQuery] = None,
        ask: Optional[Callable[[int], str]] = None
    ):
        self.query = query or process_query
        self.ask = ask or ui.ask_selection

    def resolve(self, term: str) -> ProcessRef:
        """
        Resolve a search term to one process

        Args:
            term: Search term (regular expression over the command line)

        Returns:
            The selected process

        Raises:
            NoMatch: the initial term matched nothing
            SelectionCancelled: user pressed Ctrl+C at the prompt
            SelectionExhausted: input closed before a choice was made
        """
        matches = self.query.search(term)
        if len(matches) == 1:
            return matches[0]

        ui.display_process_table(term, matches)

        while True:
            answer = self._prompt(len(matches))

            if not answer:
                ui.print_error(f"Please enter a number between 1 and {len(matches)} or a search term")
                continue

            if is_numeric(answer):
                try:
                    return self.choose(matches, answer)
                except InvalidSelection as e:
                    ui.print_error(str(e))
                    continue

            # Anything else is a brand new search
            ui.print_info(f"Searching for '{answer}'...")
            try:
                refined = self.query.search(answer)
            except NoMatch as e:
                ui.print_error(str(e))
                ui.print_hint(f"You can try again or select from the previous list (1-{len(matches)})")
                continue

            if len(refined) == 1:
                return refined[0]

            matches = refined
            term = answer
            ui.display_process_table(term, matches)

    @staticmethod
    def choose(matches: List[ProcessRef], choice: str) -> ProcessRef:
        """Pick the 1-based row `choice` from a match list"""
        index = int(choice)
        if not 1 <= index <= len(matches):
            raise InvalidSelection(choice, len(matches))
        return matches[index - 1]

    def _prompt(self, count: int) -> str:
        try:
            return self.ask(count).strip()
        except KeyboardInterrupt:
            raise SelectionCancelled()
        except EOFError:
            raise SelectionExhausted(count)
