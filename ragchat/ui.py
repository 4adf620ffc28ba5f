# Run from project root: streamlit run ragchat/ui.py
# UI talks to backend API (POST /chat). Chat history is stored on server by sessionId.

import sys
import uuid
from pathlib import Path

# Streamlit puts ragchat/ on the path, not the project root
_root = str(Path(__file__).resolve().parent.parent)
if _root not in sys.path:
    sys.path.insert(0, _root)

import requests
import streamlit as st

from ragchat.core.config import API_BASE, ORG_NAME

st.title(f"{ORG_NAME} Handbook Assistant")

if "session_id" not in st.session_state:
    st.session_state.session_id = str(uuid.uuid4())
if "messages" not in st.session_state:
    st.session_state.messages = []

with st.sidebar:
    use_rag = st.toggle("Answer from the employee handbook", value=True)
    mode = st.radio("Mode", options=["basic", "agent"], horizontal=True)
    st.caption(f"Session: {st.session_state.session_id[:8]}")
    if st.button("New conversation"):
        try:
            requests.delete(f"{API_BASE}/sessions/{st.session_state.session_id}", timeout=10)
        except requests.RequestException:
            st.caption("Backend not reachable; previous session was not cleared on the server.")
        st.session_state.session_id = str(uuid.uuid4())
        st.session_state.messages = []
        st.rerun()

for msg in st.session_state.messages:
    with st.chat_message(msg["role"]):
        st.markdown(msg["content"])
        for i, src in enumerate(msg.get("sources") or [], 1):
            with st.expander(f"Source {i}"):
                st.write(src)

question = st.chat_input("Ask a question about company policies...")
if question:
    st.session_state.messages.append({"role": "user", "content": question})
    with st.chat_message("user"):
        st.markdown(question)

    payload = {
        "message": question,
        "useRAG": use_rag,
        "sessionId": st.session_state.session_id,
        "mode": mode,
    }
    with st.chat_message("assistant"):
        with st.spinner("Thinking..."):
            try:
                r = requests.post(f"{API_BASE}/chat", json=payload, timeout=120)
                data = r.json()
                if not r.ok:
                    st.error(data.get("message") or data.get("error") or f"Request failed: {r.status_code}")
            except (requests.RequestException, ValueError) as e:
                data = {"reply": f"Backend not reachable. Start the API first. ({e})", "sources": []}
        reply = data.get("reply") or data.get("error") or ""
        st.markdown(reply)
        sources = data.get("sources") or []
        for i, src in enumerate(sources, 1):
            with st.expander(f"Source {i}"):
                st.write(src)
    st.session_state.messages.append({"role": "assistant", "content": reply, "sources": sources})
