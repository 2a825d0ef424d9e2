"""Shared fixtures: sample notes and a note-writing factory"""

import textwrap

import pytest

from notecheck.config import Settings


SAMPLE_NOTE = """\
# Meet the new thing

@Metadata {
   @TitleHeading("WWDC24")
   @PageKind(sampleCode)
   @PageImage(purpose: card, source: "WWDC24-10123-card", alt: "Card")
   @CallToAction(url: "https://developer.apple.com/wwdc24/10123", purpose: link, label: "Watch Video (15 min)")
   @Contributors {
      @GitHubUser(alice)
      @GitHubUser(bob)
   }
}

Intro prose. See <doc:WWDC24-10124-Other-Talk> for more.

## Details

@Image(source: "WWDC24-10123-diagram", alt: "A diagram")

Inline code `<doc:not-a-link>` is ignored.

```swift
let link = "<doc:also-not-a-link>"
```
"""

SAMPLE_NAME = "WWDC24-10123-Meet-the-new-thing.md"


def note_text(title: str = "A Talk", body: str = "Some prose.\n", session: str = "10001") -> str:
    """A minimal well-formed note with the given title and body."""
    return textwrap.dedent(f"""\
        # {title}

        @Metadata {{
           @TitleHeading("WWDC24")
           @PageKind(article)
           @CallToAction(url: "https://developer.apple.com/wwdc24/{session}", purpose: link, label: "Watch")
           @Contributors {{
              @GitHubUser(someone)
           }}
        }}

        """) + body


@pytest.fixture(name="sample_note")
def sample_note_fixture() -> str:
    return SAMPLE_NOTE


@pytest.fixture(name="sample_name")
def sample_name_fixture() -> str:
    return SAMPLE_NAME


@pytest.fixture(name="make_note")
def make_note_fixture():
    """Factory returning note text; see note_text for parameters."""
    return note_text


@pytest.fixture(name="write_note")
def write_note_fixture(tmp_path):
    """Factory writing text to tmp_path/<name> (creating parents) and returning the path."""
    def _write(name: str, text: str):
        path = tmp_path / name
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(text, encoding="utf-8")
        return path
    return _write


@pytest.fixture(name="settings")
def settings_fixture(tmp_path) -> Settings:
    return Settings(corpus_root=str(tmp_path))
