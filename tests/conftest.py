from __future__ import annotations

import sys
import textwrap
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))

from snippet_extractor.models import ExtractionConfig, TagSet


SOURCE_TREE = {
    "basic.ts": """
        // :snippet-start:basic-function
        function add(a: number, b: number): number { return a + b; }
        // :snippet-end:
    """,
    "math.ts": """
        // :snippet-start:math-add
        function add(a: number, b: number): number {
            return a + b;
        }
        // :snippet-end:

        // :snippet-start:math-subtract
        function subtract(a: number, b: number): number {
            return a - b;
        }
        // :snippet-end:

        // :snippet-start:math-multiply
        function multiply(a: number, b: number): number {
            return a * b;
        }
        // :snippet-end:
    """,
    "indentation.ts": """
        // :snippet-start:no-indent
        function noIndent(): void {
        console.log("No indentation");
        }
        // :snippet-end:

        // :snippet-start:normal-indent
        function normalIndent(): void {
            console.log("Normal indentation");
            if (true) {
                return;
            }
        }
        // :snippet-end:

        export class Wrapper {
            // :snippet-start:whole-block-indent
            function wholeBlockIndent(): void {
                console.log("Everything indented");
            }
            // :snippet-end:
        }
    """,
    "services/user.ts": """
        // :prepend-start:user-imports
        import { Database } from './database';
        import { User } from './models/user';
        // :prepend-end:

        // :snippet-start:user-service
        // :prepend-start:user-imports
        export class UserService {
            constructor(private db: Database) {}

            findUserById(id: string): User {
                return this.db.find(id);
            }
        }
        // :snippet-end:
    """,
    "services/complex.ts": """
        // :prepend-start:core-imports
        import { Database } from './database';
        import { Logger } from './logger';
        // :prepend-end:

        // :prepend-start:infra-imports
        import { Config } from './config';
        import { Metrics } from './metrics';
        // :prepend-end:

        // :snippet-start:complex-service
        // :prepend-start:core-imports
        // :prepend-start:infra-imports
        export class ComplexService {
            constructor(
                private db: Database,
                private logger: Logger,
                private metrics: Metrics,
                private config: Config,
            ) {}

            processData(): void {
                this.logger.info('processing');
            }
        }
        // :snippet-end:
    """,
    "repositories/shared.ts": """
        // :prepend-start:shared-db
        import { Database } from './database';
        // :prepend-end:
    """,
    "repositories/repos.ts": """
        // :prepend-start:user-model
        import { User } from './models/user';
        // :prepend-end:

        // :prepend-start:post-model
        import { Post } from './models/post';
        import { PostValidator } from './validators/post';
        // :prepend-end:

        // :snippet-start:user-repository
        // :prepend-start:shared-db
        // :prepend-start:user-model
        export class UserRepository {
            constructor(private db: Database) {}
        }
        // :snippet-end:

        // :snippet-start:post-repository
        // :prepend-start:shared-db
        // :prepend-start:post-model
        export class PostRepository {
            constructor(private db: Database, private validator: PostValidator) {}
        }
        // :snippet-end:
    """,
    "missing.ts": """
        // :snippet-start:missing-prepend
        // :prepend-start:does-not-exist
        export function functionWithMissingPrepend() {
            console.log("This snippet references a prepend block that doesn't exist");
        }
        // :snippet-end:
    """,
    "orphan.ts": """
        // :prepend-start:existing-prepend
        import { Something } from './something';
        // :prepend-end:

        // :prepend-start:orphaned-prepend
        import { NeverUsed } from './never-used';
        // :prepend-end:

        // :snippet-start:existing-prepend
        // :prepend-start:existing-prepend
        export function functionWithPrepend() {
            return new Something();
        }
        // :snippet-end:
    """,
    "example.js": """
        // :snippet-start:js-function
        function jsFunction() {
            return 'js';
        }
        // :snippet-end:
    """,
    "config.xml": """
        <!-- :snippet-start:xml-config -->
        <config>
            <name>demo</name>
        </config>
        <!-- :snippet-end: -->
    """,
    "mixed.py": """
        # :snippet-start:python-style
        def calculate_sum(a, b):
            return a + b
        # :snippet-end:

        # :snippet-start:ruby-style
        def hello(name):
            print(f"hello {name}")
        # :snippet-end:

        # :snippet-start:typescript-style
        def divide(a, b):
            # function divide in typescript would be typed
            return a / b
        # :snippet-end:
    """,
    "hello.rb": """
        # :snippet-start:ruby-function
        def hello_world
          puts "Hello, world!"
        end
        # :snippet-end:
    """,
    "custom_tags.ts": """
        /* @snippet-begin: custom-tagged-function */
        function customTagged(): string {
            return 'custom';
        }
        /* @snippet-end */

        // #region snippet:region-style
        function regionStyleFunction(): string {
            return 'region';
        }
        // #endregion

        /* [snippet:start] bracket-style */
        function bracketStyle(): string {
            return 'bracket';
        }
        /* [snippet:end] */

        // :snippet-start:ignored-function
        function ignoredFunction(): void {}
        // :snippet-end:
    """,
}

JSDOC_TAGS = {
    "start": "/* @snippet-begin:",
    "end": "/* @snippet-end */",
    "prependStart": "/* @prepend-begin:",
    "prependEnd": "/* @prepend-end */",
}

REGION_TAGS = {
    "start": "// #region snippet:",
    "end": "// #endregion",
    "prependStart": "// #region prepend:",
    "prependEnd": "// #endregion",
}

BRACKET_TAGS = {
    "start": "/* [snippet:start]",
    "end": "/* [snippet:end] */",
    "prependStart": "/* [prepend:start]",
    "prependEnd": "/* [prepend:end] */",
}


def write_tree(root: Path, files: dict[str, str]) -> Path:
    for relative, body in files.items():
        path = root / relative
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(textwrap.dedent(body).lstrip("\n"), encoding="utf-8")
    return root


@pytest.fixture
def source_tree(tmp_path) -> Path:
    return write_tree(tmp_path / "snippets", SOURCE_TREE)


@pytest.fixture
def output_dir(tmp_path) -> Path:
    return tmp_path / "output"


@pytest.fixture
def make_config(source_tree, output_dir):
    def _make(**overrides) -> ExtractionConfig:
        payload = {
            "root_directory": source_tree,
            "snippet_output_directory": output_dir,
            "file_extensions": [".ts"],
        }
        payload.update(overrides)
        return ExtractionConfig(**payload)

    return _make


@pytest.fixture
def default_tags() -> TagSet:
    return TagSet()
