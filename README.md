# lectures

Tools for turning AI-generated lecture material into clean, well-cited
Markdown and exporting it as PDF, DOCX or Markdown.

The package offers:

- **A Markdown AST** (`lectures.nodes`): `Node`, `NodeType`, `ListType`,
  `TableRow` and `TableAlignment`, with `Node.walk()` for traversal.
- **A parser** (`lectures.parser.Parser`) that reads Markdown into a tree of
  sections, paragraphs, nested lists, tables, code blocks, display equations
  and footnotes. It turns LaTeX math delimiters (`\(...\)`, `\[...\]`) into
  `$`/`$$`, strips numbering prefixes from headings and detects the list
  indentation unit on its own.
- **Text helpers** (`lectures.textops`): `escape_dollar_signs`,
  `clean_title`, `detect_indent_unit`, `unwrap_backtick_math`,
  `convert_latex_math_delimiters` and `split_by_pipes_outside_math`.
- **A reconstructor** (`lectures.reconstructor.Reconstructor`) that renders
  the tree back to Markdown, including localised footnote metadata and
  figures for cited pages.
- **Citations** (`lectures.citations`): `parse_citations` turns
  `{{{description-file.pdf-p1, 3-5}}}` markers into `[^N]` footnote
  references; `parse_page_string` and `format_page_numbers` convert between
  page lists and strings such as `1–3, 5`.
- **Image enrichment** (`lectures.enrichment.enrich_with_cited_images`),
  which appends images of cited pages to the level 2 or level 3 section
  where each page is first cited.
- **Localisation** (`lectures.i18n`): `get_label` and
  `format_localized_date` for English, Italian, Spanish, French, German and
  Portuguese.
- **Export** (`lectures.converter.PandocConverter`) through the external
  `pandoc` and `tectonic` programs, with a localised metadata header.
- **Media probing** (`lectures.media.media_duration_ms`) through `ffprobe`.
- **Provider routing** (`lectures.providers`): chat request types and a
  `RoutingProvider` that picks a `Provider` by the model's `name:` prefix.

## Installation

```
pip install .
```

The package has no third-party runtime dependencies. To export documents,
`pandoc` and `tectonic` must be on `PATH`; to probe media durations,
`ffprobe` (part of ffmpeg) must be on `PATH`.

## Parsing and reconstructing Markdown

```python
from lectures.parser import Parser
from lectures.reconstructor import Reconstructor

tree = Parser().parse("# 1. Introduction\n\nSome text [^1]\n")
print(Reconstructor().reconstruct(tree))
# # Introduction
#
# Some text[^1]
```

## Citations

```python
from lectures.reconstructor import Reconstructor

reconstructor = Reconstructor(language="en")
text, citations = reconstructor.parse_citations(
    "A claim {{{Claim info-slides.pdf-p5-6}}}"
)
# text == "A claim[^1]"
print(reconstructor.append_citations(text, citations))
# A claim[^1]
#
# [^1]: Claim info (`slides.pdf`, pp. 5–6)
```

```python
from lectures.citations import format_page_numbers, parse_page_string

format_page_numbers([1, 2, 3, 5])   # "1–3, 5"
parse_page_string("1-3, 9")         # [1, 2, 3, 9]
```

## Exporting

```python
from datetime import datetime
from lectures.converter import ConversionOptions, PandocConverter

converter = PandocConverter("data")
converter.check_dependencies()
options = ConversionOptions(language="it", creation_date=datetime(2024, 3, 1))
markdown = converter.generate_metadata_header(options) + "# Title\n"
html = converter.markdown_to_html(markdown)
converter.html_to_pdf(html, "guide.pdf", options)
```

Missing programs and failed conversions raise `ConversionError`.
`lectures.media.media_duration_ms` raises `MediaProbeError` in the same way.

## Routing chat requests

`Provider` is an abstract class with a `name` and a `chat(request)` method
that returns the response chunks. `RoutingProvider` forwards a request to
the provider registered under the model's prefix, strips that prefix from
`request.model`, and otherwise falls back to its default provider.

```python
from lectures.providers import ChatRequest, ChatResponseChunk, Provider, RoutingProvider


class EchoProvider(Provider):
    name = "echo"

    def chat(self, request):
        yield ChatResponseChunk(text=request.model)


router = RoutingProvider()
router.register("echo", EchoProvider())
chunks = list(router.chat(ChatRequest(model="echo:small")))
# chunks[0].text == "small"
```

If no provider matches and there is no default, `ProviderNotFoundError` is
raised.

## What the package does not do

- It ships no concrete clients for language-model services: the
  `ollama` and `openrouter` prefixes are recognised by `RoutingProvider`,
  but you must register your own `Provider` implementations for them.
- It has no command-line program, no server and no storage; it is a
  library to be called from your own code.

## Running the tests

```
pip install .[test]
pytest
```