"""Provider interception wrappers.

  - openai.py    — ShrikeOpenAI     (chat.completions.create, incl. stream=True)
  - anthropic.py — ShrikeAnthropic  (messages.create, messages.stream)
  - gemini.py    — ShrikeGemini     (generate_content[_stream], chat send_message[_stream])

All three drive the same Interceptor; they differ only in how user content is
extracted and which provider method receives the untouched request.
"""
