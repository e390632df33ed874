"""Plain-text rendering of the phonebook view."""

from phonebook.src.view.phonebook import PhonebookView


def render(view: PhonebookView) -> str:
    lines = ["Phonebook"]

    notification = view.notifier.current
    if notification is not None:
        marker = "!" if notification.kind == "error" else "*"
        lines.append(f"{marker} {notification.message}")

    lines.append(f"filter shown with: {view.filter_text}")
    lines.append("")
    lines.append("Numbers")

    visible = view.visible_persons()
    if not visible:
        lines.append("(no entries)")
    for person in visible:
        lines.append(f"{person.name} {person.number}")

    return "\n".join(lines)
