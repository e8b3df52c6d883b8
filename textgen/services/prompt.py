RESEARCH_HINT = "Please research using available tools or knowledge: "

def build_prompt(base: str, additional: str | None = None) -> str:
    if additional:
        return f"{base}\n{additional}"
    return base

def with_research_hint(prompt: str) -> str:
    # a textual nudge only; the provider is free to ignore it
    return f"{RESEARCH_HINT}{prompt}"
