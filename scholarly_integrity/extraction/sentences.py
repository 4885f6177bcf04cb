"""Block and sentence segmentation for draft text.

All functions here are pure: the abbreviation table and heading limits are
passed in, never read from module state.
"""

import re


# Abbreviations whose trailing period never ends a sentence
DEFAULT_ABBREVIATIONS: tuple[str, ...] = (
    "et al.",
    "e.g.",
    "i.e.",
    "cf.",
    "etc.",
    "vs.",
    "viz.",
    "approx.",
    "ca.",
    "Fig.",
    "Figs.",
    "Eq.",
    "Eqs.",
    "Tab.",
    "Sec.",
    "Ch.",
    "Vol.",
    "No.",
    "pp.",
    "p.",
    "ed.",
    "eds.",
    "Dr.",
    "Prof.",
    "Mr.",
    "Ms.",
)

_OPENERS = "([{"
_CLOSERS = ")]}"
_TERMINATORS = ".!?"
_TRAILING = "\"'”’"

_MARKDOWN_HEADING = re.compile(r"^\s*#{1,6}\s")
# "1.", "2.1", "IV.", "a)", "(b)", "-", "*" followed by a short label
_LIST_LABEL = re.compile(
    r"^\s*(?:[-*•]|\(?(?:\d+(?:\.\d+)*|[ivxlcdm]+|[a-z])[.)])\s+\S",
    re.IGNORECASE,
)
# Function words allowed in lower case inside a title-cased heading
_TITLE_SMALL_WORDS = frozenset({
    "a", "an", "and", "as", "at", "by", "for", "in", "of", "on", "or",
    "the", "to", "vs", "with",
})


# =============================================================================
# Blocks and Headings
# =============================================================================


def split_blocks(text: str) -> list[tuple[str, int]]:
    """
    Split text into blocks separated by blank lines.

    Returns:
        (block, start offset) pairs; whitespace-only blocks are dropped.
    """
    blocks = []
    for match in re.finditer(r"\S(?:.*?\S)?(?=[ \t]*\n[ \t]*\n|\s*\Z)", text, re.DOTALL):
        blocks.append((match.group(0), match.start()))
    return blocks


def _is_title_case(line: str) -> bool:
    words = re.findall(r"[A-Za-z][A-Za-z'\-]*", line)
    if not words:
        return True
    for index, word in enumerate(words):
        if index > 0 and word.lower() in _TITLE_SMALL_WORDS:
            continue
        if not word[0].isupper():
            return False
    return True


def is_heading(block: str, max_heading_words: int = 12) -> bool:
    """
    Decide whether a block is a heading rather than prose.

    A block is a heading when it is a single line and one of:
    - a Markdown heading ("## Methods")
    - a list or numbering label ("2.1 Data Collection", "a) Scope")
      short enough to be a label
    - a title-cased line without terminal punctuation

    Examples:
        >>> is_heading("## Results")
        True
        >>> is_heading("Methodological Evaluation")
        True
        >>> is_heading("This fact is universally accepted")
        False
    """
    stripped = block.strip()
    if not stripped or "\n" in stripped:
        return False

    if _MARKDOWN_HEADING.match(stripped):
        return True

    word_count = len(stripped.split())
    if word_count > max_heading_words:
        return False

    ends_with_terminator = stripped.rstrip(_TRAILING + _CLOSERS)[-1:] in _TERMINATORS

    # A numbered label like "2.1 Data Collection"; numbered prose keeps its period
    if _LIST_LABEL.match(stripped) and not ends_with_terminator:
        return True

    return not ends_with_terminator and _is_title_case(stripped)


# =============================================================================
# Sentences
# =============================================================================


def _ends_with_abbreviation(text: str, end: int, abbreviations: tuple[str, ...]) -> bool:
    """Whether text[:end] ends with an abbreviation or a single initial."""
    head = text[:end]
    lowered = head.lower()
    for abbreviation in abbreviations:
        if lowered.endswith(abbreviation.lower()):
            start = end - len(abbreviation)
            if start == 0 or not head[start - 1].isalnum():
                return True
    # Initials such as "J. Smith"
    return bool(re.search(r"(?:^|[\s(\[])[A-Z]\.$", head))


def split_sentences(
    text: str,
    abbreviations: tuple[str, ...] = DEFAULT_ABBREVIATIONS,
) -> list[tuple[str, int, int]]:
    """
    Split text into sentences with position info.

    A sentence ends at '.', '!' or '?' followed by whitespace or the end of
    text, except:
    - inside brackets or parentheses
    - after an abbreviation from the table, or a single-letter initial

    Args:
        text: Prose to split.
        abbreviations: Abbreviations that never end a sentence.

    Returns:
        (sentence, start, end) triples in text order.
    """
    sentences = []
    depth = 0
    start = 0
    i = 0
    length = len(text)

    while i < length:
        ch = text[i]
        if ch in _OPENERS:
            depth += 1
        elif ch in _CLOSERS:
            depth = max(depth - 1, 0)
        elif ch in _TERMINATORS and depth == 0:
            end = i + 1
            while end < length and (text[end] in _TERMINATORS or text[end] in _TRAILING):
                end += 1
            at_boundary = end >= length or text[end].isspace()
            if at_boundary and not (ch == "." and _ends_with_abbreviation(text, i + 1, abbreviations)):
                sentence = text[start:end].strip()
                if sentence:
                    sentences.append((" ".join(sentence.split()), start, end))
                start = end
            i = end
            continue
        i += 1

    # Handle final sentence without ending punctuation
    if start < length:
        final = text[start:].strip()
        if final:
            sentences.append((" ".join(final.split()), start, length))

    return sentences
