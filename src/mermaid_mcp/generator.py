"""
Text-to-Mermaid diagram generation.

Pure functions that turn free text into Mermaid source.  When no diagram
kind is given, :func:`detect_diagram_kind` picks one from marker words in
the text.  Each kind then chooses a template by secondary keywords.

Caller text is never interpolated raw: labels, messages and titles go
through :func:`escape_label` (Mermaid ``#NNN;`` entity codes), and text used
as an identifier goes through :func:`to_identifier`.
"""

from __future__ import annotations

import re
from typing import Callable, Optional, Union

from mermaid_mcp.errors import InvalidDiagramTypeError
from mermaid_mcp.models import DiagramKind, GeneratedDiagram

INDENT = "    "

ARROW_TOKENS = ("->", "→")
_ARROW_SPLIT_RE = re.compile(r"\s*(?:-+>+|→)\s*")

# Characters that terminate or restructure a Mermaid label.
_ENTITY_CODES = str.maketrans({
    "#": "#35;",
    '"': "#34;",
    "`": "#96;",
    "(": "#40;",
    ")": "#41;",
    "[": "#91;",
    "]": "#93;",
    "{": "#123;",
    "}": "#125;",
    "<": "#60;",
    ">": "#62;",
    "|": "#124;",
    ";": "#59;",
})

_NON_IDENTIFIER_RE = re.compile(r"[^A-Za-z0-9_]")


# ---------------------------------------------------------------------------
# Text helpers
# ---------------------------------------------------------------------------

def escape_label(text: str) -> str:
    """Make *text* safe to embed in a Mermaid label, message or title.

    Whitespace runs (including newlines) collapse to a single space.
    """
    return " ".join(text.split()).translate(_ENTITY_CODES)


def to_identifier(text: str, fallback: str) -> str:
    """Reduce *text* to ``[A-Za-z0-9_]`` for use as a node/class/entity name."""
    return _NON_IDENTIFIER_RE.sub("", text) or fallback


def has_arrow(text: str) -> bool:
    return any(token in text for token in ARROW_TOKENS)


def split_arrows(text: str) -> list[str]:
    """Split *text* on arrow tokens, dropping empty segments."""
    return [seg for seg in _ARROW_SPLIT_RE.split(text.strip()) if seg.strip()]


def non_blank_lines(text: str) -> list[str]:
    return [line for line in text.splitlines() if line.strip()]


def chain_flowchart(labels: list[str], prefix: str) -> str:
    """Build a top-down flowchart with one node per label, chained in order."""
    lines = ["flowchart TD"]
    for index, label in enumerate(labels):
        node_id = f"{prefix}{index}"
        lines.append(f'{INDENT}{node_id}["{escape_label(label)}"]')
        if index < len(labels) - 1:
            lines.append(f"{INDENT}{node_id} --> {prefix}{index + 1}")
    return "\n".join(lines)


def _mentions(lowered: str, *words: str) -> bool:
    return any(word in lowered for word in words)


def _render(header: str, body: list[str]) -> str:
    return "\n".join([header] + [INDENT + line for line in body])


# ---------------------------------------------------------------------------
# Kind detection
# ---------------------------------------------------------------------------

def detect_diagram_kind(text: str) -> DiagramKind:
    """Guess the diagram kind from marker words; first match wins.

    Order: sequence ("sequence" or an arrow), class ("class" or ``{``),
    er ("entity" / "relationship"), then flowchart.
    """
    lowered = text.lower()
    if "sequence" in lowered or has_arrow(text):
        return DiagramKind.SEQUENCE
    if "class" in lowered or "{" in text:
        return DiagramKind.CLASS
    if "entity" in lowered or "relationship" in lowered:
        return DiagramKind.ER
    return DiagramKind.FLOWCHART


def resolve_kind(kind: Union[DiagramKind, str, None], text: str) -> DiagramKind:
    """Return the explicit *kind*, or the detected one when it is ``None``."""
    if kind is None:
        return detect_diagram_kind(text)
    if isinstance(kind, DiagramKind):
        return kind
    if isinstance(kind, str):
        try:
            return DiagramKind(kind)
        except ValueError:
            pass
    raise InvalidDiagramTypeError(kind, DiagramKind.values())


# ---------------------------------------------------------------------------
# Flowchart
# ---------------------------------------------------------------------------

_LOGIN_FLOW = [
    "A[User Opens App] --> B[Enter Credentials]",
    "B --> C{Valid Credentials?}",
    "C -->|Yes| D[Generate Session]",
    "C -->|No| E[Show Error Message]",
    "D --> F[Redirect to Dashboard]",
    "E --> B",
]

_REGISTER_FLOW = [
    "A[User Clicks Register] --> B[Fill Registration Form]",
    "B --> C[Submit Information]",
    "C --> D{Validation Check}",
    "D -->|Valid| E[Create Account]",
    "D -->|Invalid| F[Show Errors]",
    "E --> G[Send Verification Email]",
    "F --> B",
    "G --> H[User Verifies Email]",
    "H --> I[Account Activated]",
]

_PAYMENT_FLOW = [
    "A[Add Items to Cart] --> B[Proceed to Checkout]",
    "B --> C[Enter Payment Details]",
    "C --> D[Process Payment]",
    "D --> E{Payment Success?}",
    "E -->|Yes| F[Order Confirmed]",
    "E -->|No| G[Payment Failed]",
    "F --> H[Send Receipt]",
    "G --> C",
]


def flowchart(text: str) -> str:
    lowered = text.lower()
    if has_arrow(text):
        steps = split_arrows(" ".join(text.split()))
        if len(steps) > 1:
            return chain_flowchart(steps, "A")
    if _mentions(lowered, "login", "sign in"):
        return _render("flowchart TD", _LOGIN_FLOW)
    if _mentions(lowered, "register", "signup"):
        return _render("flowchart TD", _REGISTER_FLOW)
    if _mentions(lowered, "payment", "checkout"):
        return _render("flowchart TD", _PAYMENT_FLOW)
    title = escape_label(text[:40])
    return _render("flowchart TD", [
        f'A["Start: {title}"] --> B[Receive Input]',
        "B --> C{Validate Input}",
        "C -->|Valid| D[Process Request]",
        "C -->|Invalid| E[Return Error]",
        "D --> F[Execute Action]",
        "F --> G[Return Success]",
        "E --> H[End]",
        "G --> H",
    ])


# ---------------------------------------------------------------------------
# Sequence
# ---------------------------------------------------------------------------

# Participant ids that would be read as sequence-diagram keywords.
_SEQUENCE_KEYWORDS = {
    "activate", "actor", "alt", "and", "as", "autonumber", "box", "break",
    "create", "critical", "deactivate", "destroy", "else", "end", "loop",
    "note", "opt", "par", "participant", "rect",
}


def _parse_messages(text: str) -> tuple[dict[str, str], list[tuple[str, str, str]]]:
    """Parse ``From -> To: message`` lines.

    Returns (participant label -> id, [(from_id, to_id, message)]).
    """
    participants: dict[str, str] = {}
    messages: list[tuple[str, str, str]] = []

    def participant_id(label: str) -> str:
        if label not in participants:
            base = to_identifier(label, f"P{len(participants) + 1}")
            if base.lower() in _SEQUENCE_KEYWORDS:
                base = f"{base}_"
            taken = set(participants.values())
            ident, n = base, 2
            while ident in taken:
                ident, n = f"{base}{n}", n + 1
            participants[label] = ident
        return participants[label]

    for line in non_blank_lines(text):
        if not has_arrow(line):
            continue
        parts = _ARROW_SPLIT_RE.split(line.strip(), maxsplit=1)
        if len(parts) != 2:
            continue
        source, rest = parts[0].strip(), parts[1]
        target, sep, message = rest.partition(":")
        target = target.strip()
        if not source or not target:
            continue
        message = message.strip() if sep else ""
        messages.append((participant_id(source), participant_id(target), message or "message"))
    return participants, messages


def sequence(text: str) -> str:
    lowered = text.lower()
    if has_arrow(text):
        participants, messages = _parse_messages(text)
        if messages:
            body = [
                f"participant {ident} as {escape_label(label)}"
                for label, ident in participants.items()
            ]
            body += [f"{src}->>{dst}: {escape_label(msg)}" for src, dst, msg in messages]
            return _render("sequenceDiagram", body)
    message = escape_label(text)
    if _mentions(lowered, "api", "request"):
        return _render("sequenceDiagram", [
            "participant Client",
            "participant API",
            "participant Database",
            f"Client->>API: {message}",
            "API->>Database: Query Data",
            "Database-->>API: Results",
            "API-->>Client: JSON Response",
        ])
    if _mentions(lowered, "order", "pizza"):
        return _render("sequenceDiagram", [
            "participant Customer",
            "participant Website",
            "participant Kitchen",
            "participant Delivery",
            "Customer->>Website: Place Order",
            "Website->>Kitchen: Send Order Details",
            "Kitchen->>Kitchen: Prepare Food",
            "Kitchen->>Delivery: Ready for Pickup",
            "Delivery->>Customer: Deliver Order",
            "Customer->>Website: Confirm Receipt",
        ])
    return _render("sequenceDiagram", [
        "participant User",
        "participant System",
        "participant Service",
        f"User->>System: {message}",
        "System->>Service: Process Request",
        "Service-->>System: Return Data",
        "System-->>User: Display Result",
    ])


# ---------------------------------------------------------------------------
# Class
# ---------------------------------------------------------------------------

_INHERIT_RE = re.compile(r"(\w+)\s+(?:extends|inherits(?:\s+from)?)\s+(\w+)", re.IGNORECASE)


def _class_name(text: str) -> str:
    name = re.sub(r"^\s*class\s+", "", text, flags=re.IGNORECASE)
    name = name.split("{", 1)[0]
    return to_identifier(name, "Entity")


def class_diagram(text: str) -> str:
    lowered = text.lower()
    if _mentions(lowered, "inherit", "extends"):
        match = _INHERIT_RE.search(text)
        if match:
            child = to_identifier(match.group(1), "Derived")
            parent = to_identifier(match.group(2), "BaseEntity")
        else:
            child, parent = _class_name(text), "BaseEntity"
        return _render("classDiagram", [
            f"class {parent} {{",
            "    +String id",
            "    +save()",
            "}",
            f"class {child} {{",
            "    +String name",
            "    +process()",
            "}",
            f"{parent} <|-- {child}",
        ])
    name = _class_name(text)
    return _render("classDiagram", [
        f"class {name} {{",
        "    -id: String",
        "    -name: String",
        "    -createdAt: Date",
        "    +create()",
        "    +update()",
        "    +delete()",
        "    +find()",
        "}",
        "class Database {",
        "    +save()",
        "    +query()",
        "}",
        f"{name} --> Database",
    ])


# ---------------------------------------------------------------------------
# Entity-relationship
# ---------------------------------------------------------------------------

_ENTITY_LINE_RE = re.compile(r"^\s*entity\s+(.+)$", re.IGNORECASE)

_ORDER_MODEL = [
    "USER ||--o{ ORDER : places",
    "USER {",
    "    int id",
    "    string name",
    "    string email",
    "}",
    "ORDER ||--|{ ORDER_ITEM : contains",
    "ORDER {",
    "    int id",
    "    int user_id",
    "    date created_at",
    "}",
    "ORDER_ITEM {",
    "    int id",
    "    int order_id",
    "    int product_id",
    "    int quantity",
    "}",
    'PRODUCT ||--o{ ORDER_ITEM : "ordered in"',
    "PRODUCT {",
    "    int id",
    "    string name",
    "    decimal price",
    "}",
]


def er_diagram(text: str) -> str:
    body: list[str] = []
    seen: set[str] = set()
    for line in non_blank_lines(text):
        match = _ENTITY_LINE_RE.match(line)
        if not match:
            continue
        name = to_identifier(match.group(1).split("{", 1)[0], "")
        if not name or name in seen:
            continue
        seen.add(name)
        body += [f"{name} {{", "    string id", "}"]
    if body:
        return _render("erDiagram", body)
    return _render("erDiagram", _ORDER_MODEL)


# ---------------------------------------------------------------------------
# Gantt
# ---------------------------------------------------------------------------

def gantt(text: str) -> str:
    title = escape_label(text)
    if "sprint" in text.lower():
        return _render("gantt", [
            f"title {title}",
            "dateFormat YYYY-MM-DD",
            "section Sprint 1",
            "Sprint Planning: 2024-01-01, 1d",
            "Implementation: 2024-01-02, 8d",
            "Review and Retro: 2024-01-10, 2d",
            "section Sprint 2",
            "Sprint Planning: 2024-01-15, 1d",
            "Implementation: 2024-01-16, 8d",
            "Review and Retro: 2024-01-24, 2d",
        ])
    return _render("gantt", [
        f"title {title}",
        "dateFormat YYYY-MM-DD",
        "section Planning",
        "Requirements Gathering: 2024-01-01, 7d",
        "Design Phase: 2024-01-08, 10d",
        "section Development",
        "Backend Development: 2024-01-18, 14d",
        "Frontend Development: 2024-01-25, 14d",
        "section Testing",
        "QA Testing: 2024-02-08, 7d",
        "User Acceptance: 2024-02-15, 5d",
    ])


# ---------------------------------------------------------------------------
# Pie
# ---------------------------------------------------------------------------

_SLICE_RE = re.compile(r"^\s*([^:,\t]+?)\s*[:,\t]\s*(.*?)\s*$")
_SLICE_VALUE_RE = re.compile(r"^(\d+(?:\.\d+)?)\s*%?$")

# Value for slices whose value is missing or not a number.
DEFAULT_SLICE_VALUE = "10"


def _slice(line: str) -> tuple[str, str]:
    match = _SLICE_RE.match(line)
    if match is None:
        return line.strip(), DEFAULT_SLICE_VALUE
    value = _SLICE_VALUE_RE.match(match.group(2))
    return match.group(1), value.group(1) if value else DEFAULT_SLICE_VALUE


def pie(text: str) -> str:
    """One slice per line; a leading line without a separator is the title."""
    lines = non_blank_lines(text)
    title: Optional[str] = None
    if lines and _SLICE_RE.match(lines[0]) is None:
        title = lines.pop(0)
    slices = [_slice(line) for line in lines]
    if slices:
        header = f"pie title {escape_label(title or 'Distribution')}"
        return _render(header, [f'"{escape_label(label)}" : {value}' for label, value in slices])
    return _render(f"pie title {escape_label(text)}", [
        '"Item 1" : 30',
        '"Item 2" : 25',
        '"Item 3" : 45',
    ])


# ---------------------------------------------------------------------------
# Git graph
# ---------------------------------------------------------------------------

def git_graph(text: str) -> str:
    lowered = text.lower()
    if "release" in lowered:
        return _render("gitGraph", [
            "commit",
            "branch develop",
            "checkout develop",
            "commit",
            "branch release",
            "checkout release",
            "commit",
            "checkout main",
            "merge release",
            'commit tag: "v1.0.0"',
            "checkout develop",
            "merge release",
        ])
    if "hotfix" in lowered:
        return _render("gitGraph", [
            "commit",
            "commit",
            "branch hotfix",
            "checkout hotfix",
            "commit",
            "checkout main",
            "merge hotfix",
            "commit",
        ])
    return _render("gitGraph", [
        "commit",
        "branch develop",
        "checkout develop",
        "commit",
        "commit",
        "checkout main",
        "merge develop",
        "commit",
    ])


# ---------------------------------------------------------------------------
# Entry point
# ---------------------------------------------------------------------------

_BUILDERS: dict[DiagramKind, Callable[[str], str]] = {
    DiagramKind.FLOWCHART: flowchart,
    DiagramKind.SEQUENCE: sequence,
    DiagramKind.CLASS: class_diagram,
    DiagramKind.ER: er_diagram,
    DiagramKind.GANTT: gantt,
    DiagramKind.PIE: pie,
    DiagramKind.GIT: git_graph,
}


def generate_diagram(
    text: str,
    kind: Union[DiagramKind, str, None] = None,
) -> GeneratedDiagram:
    """Generate Mermaid source for *text*.

    Args:
        text: Non-empty free text describing the diagram.
        kind: Diagram kind (enum member or its value).  ``None`` auto-detects.

    Raises:
        ValueError: *text* is empty.
        InvalidDiagramTypeError: *kind* is not one of the supported kinds.
    """
    if not isinstance(text, str) or not text.strip():
        raise ValueError("text must be a non-empty string")
    normalized = text.strip()
    resolved = resolve_kind(kind, normalized)
    return GeneratedDiagram(source_text=_BUILDERS[resolved](normalized), kind=resolved)
