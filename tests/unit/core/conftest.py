"""Shared fixtures for core unit tests"""

import pytest

from postref.config import Settings
from postref.core.index import Collection
from postref.core.parse import build_document


RAW_POINTERS = """\
---
layout: article
title: "Avoiding ambiguity with raw pointers"
description: "Who owns a <code>T*</code>?"
tag: c++
---

A raw pointer says nothing about ownership.

{% highlight cpp %}
void take(Widget* w);
{% endhighlight %}
"""

EXCEPTIONS = """\
---
layout: article
title: Exceptions vs error codes
tag: c++
---

As argued in {% post_url 2014-06-19-avoiding-ambiguity-raw-pointers %}, signatures should say what they mean.
"""


@pytest.fixture(name="settings")
def settings_fixture():
    return Settings()


@pytest.fixture(name="make_doc")
def make_doc_fixture(settings):
    """Build a Document from a path and raw text (minimal front matter by default)."""
    def _make(path: str, raw: str = None, **overrides):
        if raw is None:
            raw = f"---\ntitle: {path}\n---\nbody of {path}\n"
        return build_document(path, raw, settings.model_copy(update=overrides))
    return _make


@pytest.fixture(name="blog")
def blog_fixture(make_doc):
    """Sealed two-post collection where the exceptions post links to the raw pointers post."""
    return Collection([
        make_doc("2014-06-19-avoiding-ambiguity-raw-pointers", RAW_POINTERS),
        make_doc("2014-07-02-exceptions-vs-error-codes", EXCEPTIONS),
    ]).seal()
