"""
LLM prompt templates, one per voice mode.

Each template contains an {input} placeholder which the LLM corrector
replaces with the preprocessed transcript.
"""

from typing import Dict

from .registry import Mode

INPUT_PLACEHOLDER = "{input}"

DEFAULT_PROMPT = """Convert spoken punctuation to symbols. Be minimal - output only the converted text.

Rules: hash -> #, dash -> -, dot -> ., equals -> =, colon -> :, semicolon -> ;
open paren -> (, close paren -> ), open bracket -> [, close bracket -> ]
greater than -> >, less than -> <, plus -> +
"dash dash" -> --, "equals equals" -> ==, "not equals" -> !=, "plus equals" -> +=

Examples:
"hash hello" -> # hello
"const x equals 5" -> const x = 5
"if x equals equals y" -> if x == y
"function hello open paren close paren" -> function hello()
"hello world" -> hello world

Input: {input}
Output:"""

MARKDOWN_PROMPT = """Convert spoken markdown commands to markdown syntax. Output only the markdown.

Commands:
h1/heading 1 = #, h2/heading 2 = ##, h3/heading 3 = ###, h4 = ####, h5 = #####, h6 = ######
"bold on" and "bold off" toggle **bold** (already converted to **)
"italic on" and "italic off" toggle *italic* (already converted to *)
"code on" and "code off" toggle `inline code` (already converted to `)
bullet/list item [text] = - text
number/numbered [text] = 1. text
link [text] to [url] = [text](url)
image [alt] from [url] = ![alt](url)
code block [lang] = ```lang (start fenced code block)
end code block = ``` (end fenced code block)
quote/block quote [text] = > text
horizontal rule/divider = ---
checkbox/todo [text] = - [ ] text
checked [text] = - [x] text

Examples:
"h1 welcome to my site" -> # welcome to my site
"this is **important** text" -> this is **important** text
"bullet first item" -> - first item
"number step one" -> 1. step one
"link my site to example.com" -> [my site](example.com)
"code block python" -> ```python
"quote this is quoted" -> > this is quoted
"checkbox remember this" -> - [ ] remember this
"this is plain text" -> this is plain text

Input: {input}
Output:"""

JAVASCRIPT_PROMPT = """Convert spoken JavaScript to code. Output only the code.

Patterns:
const/let/var [name] equals [value] = const/let/var name = value
function [name] [args...] = function name(args) { }
arrow [name] [args...] = const name = (args) => { }
if [condition] = if (condition) { }
else if [condition] = else if (condition) { }
else = else { }
for [var] in [iterable] = for (const var of iterable) { }
for [var] from [start] to [end] = for (let var = start; var < end; var++)
log [message] = console.log(message)
return [value] = return value
async function [name] = async function name() { }
await [expression] = await expression
import [name] from [module] = import name from 'module'
export [thing] = export thing

Examples:
"const count equals 0" -> const count = 0
"function add a b" -> function add(a, b) { }
"arrow double x" -> const double = (x) => { }
"if x greater than 5" -> if (x > 5) { }
"log hello world" -> console.log("hello world")
"return result" -> return result

Input: {input}
Output:"""

PHP_PROMPT = """Convert spoken PHP to code. Output only the code.

Patterns:
function [name] [args...] = function name($args) { }
class [name] = class name { }
if [condition] = if (condition) { }
else if [condition] = elseif (condition) { }
else = else { }
foreach [item] in [array] = foreach ($array as $item) { }
for [var] from [start] to [end] = for ($var = start; $var < end; $var++)
echo [text] = echo "text"
return [value] = return value
public/private/protected function [name] = public function name() { }
new [class] = new class()
arrow = ->
double colon = ::
dollar [var] = $var

Examples:
"function hello name" -> function hello($name) { }
"echo hello world" -> echo "hello world"
"if count greater than 0" -> if ($count > 0) { }
"foreach item in items" -> foreach ($items as $item) { }
"dollar this arrow name" -> $this->name

Input: {input}
Output:"""

PYTHON_PROMPT = """Convert spoken Python to code. Output only the code.

Patterns:
def [name] [args...] = def name(args):
class [name] = class name:
if [condition] = if condition:
elif [condition] = elif condition:
else = else:
for [var] in [iterable] = for var in iterable:
while [condition] = while condition:
print [message] = print(message)
return [value] = return value
import [module] = import module
from [module] import [thing] = from module import thing
with [context] as [var] = with context as var:
try = try:
except [error] = except error:
finally = finally:

Examples:
"def hello name" -> def hello(name):
"print hello world" -> print("hello world")
"if x equals 5" -> if x == 5:
"for item in items" -> for item in items:
"from typing import list" -> from typing import List

Input: {input}
Output:"""

BASH_PROMPT = """Convert spoken bash/shell commands to code. Output only the command.

Common patterns:
cd [path] = cd path
ls [options] [path] = ls options path
mkdir [name] = mkdir name
cp [source] to [dest] = cp source dest
mv [source] to [dest] = mv source dest
grep [pattern] in [file] = grep "pattern" file
echo [text] = echo "text"
pipe = |
redirect to [file] = > file
append to [file] = >> file
and = &&
or = ||

Git:
git commit message [msg] = git commit -m "msg"
git checkout [branch] = git checkout branch

Examples:
"cd documents" -> cd documents
"ls all" -> ls -la
"mkdir new folder" -> mkdir "new folder"
"git commit message fix bug" -> git commit -m "fix bug"
"grep error in log file" -> grep "error" log file

Input: {input}
Output:"""

PROMPTS: Dict[Mode, str] = {
    Mode.NONE: DEFAULT_PROMPT,
    Mode.MARKDOWN: MARKDOWN_PROMPT,
    Mode.JAVASCRIPT: JAVASCRIPT_PROMPT,
    Mode.PHP: PHP_PROMPT,
    Mode.PYTHON: PYTHON_PROMPT,
    Mode.BASH: BASH_PROMPT,
}


def get_prompt(mode: Mode) -> str:
    """Get the LLM prompt template for a mode."""
    return PROMPTS[mode]


def render_prompt(template: str, text: str) -> str:
    """Substitute the transcript into a prompt template."""
    return template.replace(INPUT_PLACEHOLDER, text)
