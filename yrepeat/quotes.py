"""Motivational quotes, streak milestones and workout nudges."""

from __future__ import annotations

import random
from dataclasses import dataclass


@dataclass(frozen=True)
class Quote:
    text: str
    author: str | None = None

    def to_dict(self) -> dict[str, str | None]:
        return {"text": self.text, "author": self.author}


GOOD_HABIT_QUOTES = [
    Quote("Every day is a fresh start. You're doing amazing! 🌟"),
    Quote("Small steps lead to big changes. Keep going! 💪"),
    Quote("You're building something incredible, one day at a time."),
    Quote("Progress, not perfection. You've got this! ✨"),
    Quote("The best time to plant a tree was 20 years ago. The second best time is now.", "Chinese Proverb"),
    Quote("You don't have to be great to start, but you have to start to be great.", "Zig Ziglar"),
    Quote("Success is the sum of small efforts repeated day in and day out.", "Robert Collier"),
    Quote("The only way to do great work is to love what you do.", "Steve Jobs"),
    Quote("Your future is created by what you do today, not tomorrow."),
    Quote("Every expert was once a beginner. Keep going! 🚀"),
]

BAD_HABIT_QUOTES = [
    Quote("You're stronger than your excuses. Keep fighting! 💪"),
    Quote("Every day you resist is a victory. You're winning! 🏆"),
    Quote("Breaking free takes courage, and you have it. Keep going!"),
    Quote("You're not defined by your past. Today is a new beginning. ✨"),
    Quote("The chains of habit are too weak to be felt until they are too strong to be broken.", "Warren Buffett"),
    Quote("You have power over your mind - not outside events. Realize this, and you will find strength.", "Marcus Aurelius"),
    Quote("It does not matter how slowly you go as long as you do not stop.", "Confucius"),
    Quote("The first and best victory is to conquer self.", "Plato"),
    Quote("You're choosing yourself over the habit. That's powerful! 🌟"),
    Quote("Every moment you resist is building your strength. Keep it up! 💎"),
]

STREAK_MILESTONES = {
    1: "First day down! You've started your journey. 🎉",
    3: "Three days strong! You're building momentum. 💪",
    7: "One week! You're creating real change. 🌟",
    14: "Two weeks! This is becoming part of who you are. ✨",
    21: "Three weeks! They say it takes 21 days to form a habit - you're doing it! 🎊",
    30: "One month! You're unstoppable! 🚀",
    50: "50 days! You're a habit champion! 🏆",
    100: "100 days! This is incredible dedication! 💎",
    200: "200 days! You're an inspiration! 🌈",
    365: "One year! You've transformed your life! 🎉",
}

WORKOUT_MESSAGES = [
    "💪 Your body is capable of amazing things. Hit the elliptical today!",
    "🔥 Every workout counts. Let's make today count!",
    "⚡️ The only bad workout is the one you didn't do.",
    "🎯 Progress, not perfection. Get moving!",
    "🚀 Your future self will thank you. Start now!",
    "💯 Consistency is key. Keep your streak alive!",
    "🏆 Champions are made in the gym. Be a champion today!",
    "⏰ The best time to work out was yesterday. The second best is now.",
    "🌟 You're stronger than you think. Prove it!",
    "🎪 No more excuses. Let's go!",
    "💎 Your health is your wealth. Invest in it!",
    "🔋 Recharge your energy with a good workout!",
    "🎨 Create the best version of yourself, one workout at a time.",
    "🌈 Small steps lead to big changes. Take one today!",
    "⚔️ Battle the laziness. You've got this!",
]


def random_quote(is_good_habit: bool) -> Quote:
    return random.choice(GOOD_HABIT_QUOTES if is_good_habit else BAD_HABIT_QUOTES)


def milestone_message(streak: int) -> str | None:
    """Celebration text when *streak* lands exactly on a milestone."""
    return STREAK_MILESTONES.get(streak)


def random_workout_message() -> str:
    return random.choice(WORKOUT_MESSAGES)
