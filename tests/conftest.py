"""Shared test fixtures for inkwell."""

from pathlib import Path

import pytest

from inkwell.config.models import InkwellConfig

RAILS_POST = """\
---
layout: post
title: "Decorator Pattern in Rails: Beyond Draper"
date: 2017-05-28 19:00
comments: true
categories: [Ruby on Rails, Design Patterns, Ruby]
---

Decorators keep presentation logic out of your models.

<!-- more -->

## Plain Ruby decorator

``` ruby app/decorators/user_decorator.rb
class UserDecorator < SimpleDelegator
  def full_name
    "#{first_name} #{last_name}"
  end
end
```

And the view stays thin.
"""

EMBER_POST = """\
---
layout: post
title: "Ember decorators in practice"
date: 2018-02-11 10:30
comments: true
categories: [Ember, JavaScript]
---

ES decorators landed in Ember via a polyfill.

<!--more-->

```javascript
import { computed } from '@ember-decorators/object';

export default class Post {
  @computed('title')
  get slug() {}
}
```
"""

POSTGRES_POST = """\
---
layout: post
title: "Table partitioning in PostgreSQL 10"
date: 2018-02-11 08:00
comments: false
categories: [PostgreSQL, Ruby on Rails]
---

Declarative partitioning makes huge tables manageable.

{% highlight sql %}
CREATE TABLE measurements (logdate date) PARTITION BY RANGE (logdate);
{% endhighlight %}
"""

ABOUT_PAGE = """\
---
layout: page
title: "About"
comments: false
---

I build things with Rails, Ember and PostgreSQL.
"""


def write_site(root: Path, posts: dict[str, str] | None = None, pages: dict[str, str] | None = None) -> Path:
    """Lay out a minimal Jekyll source tree under `root`."""
    posts_dir = root / "_posts"
    posts_dir.mkdir(parents=True, exist_ok=True)
    if posts is None:
        posts = {
            "2017-05-28-decorator-pattern-in-rails.markdown": RAILS_POST,
            "2018-02-11-ember-decorators.markdown": EMBER_POST,
            "2018-02-11-postgres-partitioning.markdown": POSTGRES_POST,
        }
    for name, content in posts.items():
        target = posts_dir / name
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(content, encoding="utf-8")
    if pages is None:
        pages = {"about.markdown": ABOUT_PAGE}
    for name, content in pages.items():
        target = root / name
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(content, encoding="utf-8")
    return root


@pytest.fixture
def site_dir(tmp_path):
    """A temp blog source tree with three posts and an About page."""
    return write_site(tmp_path / "site")


@pytest.fixture
def site_config(site_dir):
    return InkwellConfig(
        source=str(site_dir),
        url="https://example.com",
        permalink="/blog/:year/:month/:day/:title/",
        comments=True,
    )


@pytest.fixture
def sample_config():
    return InkwellConfig()
