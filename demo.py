#!/usr/bin/env python3
"""Demo script for readme-preview."""

import tempfile
from pathlib import Path

from readme_preview.app import PreviewApp
from readme_preview.config import PreviewSettings

SAMPLE_README = """# demo-package

A sample readme. Edit the file printed above and save it: the browser
tab reloads on every save.

## Usage

```python
import demo_package

demo_package.run()
```

| Feature    | Status |
|------------|--------|
| hot reload | ✅     |
"""


def main() -> None:
    """Preview a sample readme on an OS-assigned port."""
    with tempfile.TemporaryDirectory() as workdir:
        readme = Path(workdir) / "README.md"
        readme.write_text(SAMPLE_README, encoding="utf-8")

        print("Starting readme-preview demo...")
        print(f"Edit {readme} to see the page reload")

        PreviewApp(PreviewSettings(readme=readme, port=0, open_browser=True)).run()


if __name__ == "__main__":
    main()
