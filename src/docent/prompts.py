# src/docent/prompts.py
"""Prompt templates and the grounding prompt composer."""

NO_CONTEXT_PLACEHOLDER = "No relevant document snippets were found for this query."

REWRITE_PROMPT = """Given the conversation so far, rephrase the latest user message into a \
standalone, context-free search query.
Resolve pronouns and references to earlier turns so the query can be understood on its own.
Keep it short and focused on what the user is asking for.
Reply with the query only, without quotes or explanation."""

SUMMARY_PROMPT = """Summarize the conversation below so that it can replace the original messages.
Keep every fact, name, number, decision and open question the user or assistant mentioned.
If the conversation starts with an earlier summary, fold it into the new one.
Write in plain prose, in the language of the conversation. Reply with the summary only."""

CONTEXT_PREAMBLE = "Here is relevant information extracted from the user's documents:"

CONTEXT_CLOSING = (
    "Use this information to answer the user's question. "
    "If it is not relevant to the question, ignore it."
)

SOURCE_HEADER = "## Source: {filename}"

SOURCE_SEPARATOR = "---"

GROUNDING_PROMPT = """You are a friendly, professional assistant. Your main purpose is to help \
the user based on the context information provided below.

Guidelines:
1. Greetings: Always respond warmly and welcomingly to greetings such as "Hello". Greetings \
do not need any context.
2. Factual answers: For factual questions, use only the [Context] below. Do not speculate or \
rely on outside knowledge.
3. Missing information: If the context does not contain the answer, say so politely rather \
than returning a bare error. For example: "I checked the documents but couldn't find specific \
information about [topic]. I'm happy to answer other questions within the provided materials."
4. Tone: Stay helpful, polite and encouraging throughout the conversation.
5. Privacy: Never mention how the question was rephrased, how documents were searched, or any \
other internal processing. Present only the final answer to the user.

[Context]:
{context}"""


class PromptComposer:
    """Builds the grounding instruction for the final generation call.

    compose() is a pure function of its input: the same grounding text always
    produces the same instruction.

    Example:
        composer = PromptComposer()
        instruction = composer.compose(grounding.text)
    """

    def __init__(
        self,
        template: str | None = None,
        placeholder: str = NO_CONTEXT_PLACEHOLDER,
    ) -> None:
        """Initialize the composer.

        Args:
            template: Custom instruction template with a {context} slot
            placeholder: Text substituted into the slot when there is no grounding
        """
        self.template = template or GROUNDING_PROMPT
        self.placeholder = placeholder

    def compose(self, grounding_text: str) -> str:
        """Compose the instruction for the given grounding text."""
        context = grounding_text if grounding_text.strip() else self.placeholder
        return self.template.format(context=context)
