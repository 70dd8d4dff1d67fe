"""Run the three inference stages against a local recording.

Usage: python scripts/check_inference.py [path/to/audio.webm]

Without a path only the completion model is exercised with a fixed
transcript.
"""

import asyncio
import os
import sys

# Add project root to path so we can import app
sys.path.append(os.getcwd())

from app.pipelines.intake import score_severity, summarize, transcribe
from app.services.llm_client import get_llm_client
from app.services.transcribe import get_transcribe_service
from app.utils.errors import IntakeError

SAMPLE_TRANSCRIPT = "My father collapsed in the kitchen and he is not breathing"


async def main():
    transcript = SAMPLE_TRANSCRIPT
    if len(sys.argv) > 1:
        file_path = sys.argv[1]
        if not os.path.exists(file_path):
            print(f"File '{file_path}' not found.")
            return
        print(f"Transcribing {file_path} with Amazon Transcribe Streaming...")
        try:
            transcript = await transcribe(file_path, get_transcribe_service())
        except IntakeError as e:
            print(f"\nTranscription Error: {e}")
            return

    print("\n--- Transcript ---")
    print(transcript)

    client = get_llm_client()
    try:
        print("\n--- Severity ---")
        print(await score_severity(transcript, client))
        print("\n--- Summary ---")
        print(await summarize(transcript, client))
    except IntakeError as e:
        print(f"\nCompletion Error: {e}")


if __name__ == "__main__":
    asyncio.run(main())
