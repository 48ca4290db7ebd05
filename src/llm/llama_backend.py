from typing import Any

from .config import LLMConfig
from .errors import LLMDependencyError, OracleCallError

GBNF_SCHEMA = r"""
root ::= "{" ws "\"recommendations\"" ws ":" ws "[" ws items? ws "]" ws "}"
items ::= object | object ws "," ws items
object ::= "{" ws "}" | "{" ws kv-list ws "}"
kv-list ::= kv-pair | kv-pair ws "," ws kv-list
kv-pair ::= string ws ":" ws value
value ::= object | array | string | number | "true" | "false" | "null"
array ::= "[" ws "]" | "[" ws value (ws "," ws value)* ws "]"
string ::= "\"" (char)* "\""
char ::= [^"\\] | escape
escape ::= "\\" (["\\/bfnrt] | "u" hex hex hex hex)
hex ::= [0-9a-fA-F]
number ::= int frac? exp?
int ::= "-"? ([0-9] | [1-9] (digit)*)
frac ::= "." (digit)+
exp ::= [eE] [-+]? (digit)+
digit ::= [0-9]
ws ::= ([ \t\n\r])*
""".strip()


class LlamaBackend:
    """Local llama.cpp backend; the grammar pins the top-level JSON shape."""

    def __init__(self, config: LLMConfig):
        try:
            from llama_cpp import Llama, LlamaGrammar
        except ImportError as error:  # pragma: no cover - optional dependency
            raise LLMDependencyError(
                "Llama backend requires the llama-cpp-python package."
            ) from error

        self._llm = Llama(
            model_path=config.model_path,
            n_threads=config.n_threads,
            n_ctx=config.n_ctx,
            n_batch=config.n_batch,
            verbose=config.verbose,
        )
        self._grammar = LlamaGrammar.from_string(GBNF_SCHEMA)
        self._config = config

    def complete(self, prompt: str, *, prefix: str = "") -> str:
        # The grammar already forces the opening brace, so the prefix is not sent.
        try:
            response: dict[str, Any] = self._llm.create_chat_completion(
                messages=[{"role": "user", "content": prompt}],
                temperature=self._config.temperature,
                top_p=self._config.top_p,
                repeat_penalty=self._config.repeat_penalty,
                max_tokens=self._config.max_tokens,
                grammar=self._grammar,
            )
            return response["choices"][0]["message"]["content"]
        except Exception as error:
            raise OracleCallError(f"llama.cpp completion failed: {error}") from error
