from llm.prompts import build_summary_messages, build_summary_prompt


def test_prompt_contains_title_content_and_instructions():
    prompt = build_summary_prompt("  Property tax deadline  ", "Pay by 31 March to avoid penalties.")

    assert "2-3 sentence plain-language summary" in prompt
    assert "Title: Property tax deadline\n" in prompt
    assert "Content: Pay by 31 March to avoid penalties." in prompt
    for line in ("Easy to understand", "deadlines", "who is affected", "concise and actionable"):
        assert line in prompt


def test_messages_have_system_and_user_roles():
    messages = build_summary_messages("Title", "Content")

    assert [m["role"] for m in messages] == ["system", "user"]
    assert messages[1]["content"] == build_summary_prompt("Title", "Content")
