from pathlib import Path

import pytest

from sprintblog.services.content_source import FileSystemContentSource
from sprintblog.services.post_repository import PostRepository


POSTS = {
    "kafka-consumer-groups.md": """---
title: Kafka Consumer Groups
description: How partitions are balanced across consumers.
date: 2025-03-01
category: Java
tags: [java, Kafka]
featured: true
coverImage: /images/kafka.png
---

## Why Consumer Groups

Consumers in a group **share** partitions.

### Rebalancing

A rebalance happens when membership changes.
""",
    "designing-rate-limiters.mdx": """---
title: Designing Rate Limiters
description: Token buckets, leaky buckets and sliding windows.
date: "2025-01-15"
category: System Design
tags:
  - rate-limiting
featured: false
affiliateSection: system-design-books
---

Rate limiters protect services from overload.
""",
    "spring-boot-startup.md": """---
title: Spring Boot Startup
description: Where the time goes during startup.
date: 2025-02-10
category: Java
tags: [spring]
featured: true
---

Startup time matters for autoscaling.
""",
    "postgres-indexing.md": """---
title: Postgres Indexing (md)
description: Older markdown copy.
date: 2024-12-01
category: Databases
tags: [sql]
featured: true
---

This copy should be shadowed by the mdx file.
""",
    "postgres-indexing.mdx": """---
title: Postgres Indexing
description: B-trees, GIN and partial indexes.
date: 2024-12-01
category: Databases
tags: [sql, postgres]
featured: true
---

Indexes trade write cost for read speed.
""",
    "notes.txt": "not a post",
}


def write_posts(directory: Path, posts: dict) -> Path:
    directory.mkdir(parents=True, exist_ok=True)
    for name, text in posts.items():
        (directory / name).write_text(text, encoding="utf-8")
    return directory


@pytest.fixture
def content_dir(tmp_path):
    return write_posts(tmp_path / "blog", POSTS)


@pytest.fixture
def repository(content_dir):
    return PostRepository(FileSystemContentSource(content_dir))
