"""
Mobile screen generators for React Native, Flutter, SwiftUI and Jetpack
Compose.

Feature text reaches each language through its own literal escaper:
js_string() for TypeScript, swift_string() for Swift and
interpolating_string() for Dart and Kotlin.

codeintel/src/codeintel/templates/mobile.py
"""

from ..comments import interpolating_string, js_string, swift_string
from . import TemplateContext, render

__all__ = ["react_native", "flutter", "swiftui", "compose"]

_REACT_NATIVE = """
import React, { useCallback, useEffect, useState } from 'react';
import {
  ActivityIndicator,
  Alert,
  FlatList,
  Pressable,
  SafeAreaView,
  StyleSheet,
  Text,
  View,
} from 'react-native';

const FEATURE = __FEATURE_JS__;
const ENDPOINT = 'https://api.example.com/items';

interface __CLASSNAME__Item {
  id: string;
  title: string;
}

const __CLASSNAME__Screen = () => {
  const [items, setItems] = useState<__CLASSNAME__Item[]>([]);
  const [loading, setLoading] = useState<boolean>(true);

  const load = useCallback(async () => {
    setLoading(true);
    try {
      const response = await fetch(ENDPOINT);
      if (!response.ok) {
        throw new Error(`Request failed (${response.status})`);
      }
      setItems(await response.json());
    } catch (error) {
      Alert.alert('Could not load items', 'Check your connection and try again.');
    } finally {
      setLoading(false);
    }
  }, []);

  useEffect(() => {
    load();
  }, [load]);

  const renderItem = useCallback(
    ({ item }: { item: __CLASSNAME__Item }) => (
      <Pressable
        style={styles.row}
        accessibilityRole="button"
        accessibilityLabel={item.title}
        accessibilityHint="Opens the item details"
        testID={`item-${item.id}`}
      >
        <Text style={styles.rowText}>{item.title}</Text>
      </Pressable>
    ),
    []
  );

  return (
    <SafeAreaView style={styles.container}>
      <Text style={styles.title} accessibilityRole="header">
        {FEATURE}
      </Text>
      {loading ? (
        <ActivityIndicator accessibilityLabel="Loading" />
      ) : (
        <FlatList
          data={items}
          keyExtractor={(item) => item.id}
          renderItem={renderItem}
          initialNumToRender={10}
          windowSize={5}
          removeClippedSubviews
          onRefresh={load}
          refreshing={loading}
          ListEmptyComponent={<View><Text>No items yet</Text></View>}
        />
      )}
    </SafeAreaView>
  );
};

const styles = StyleSheet.create({
  container: { flex: 1, backgroundColor: '#ffffff' },
  title: { fontSize: 24, fontWeight: '600', padding: 16 },
  row: { minHeight: 44, paddingHorizontal: 16, justifyContent: 'center' },
  rowText: { fontSize: 16 },
});

export default React.memo(__CLASSNAME__Screen);
"""

_FLUTTER = """
import 'dart:convert';

import 'package:flutter/material.dart';
import 'package:http/http.dart' as http;

const String kFeature = __FEATURE_DART__;
final Uri kEndpoint = Uri.parse('https://api.example.com/items');

class __CLASSNAME__Screen extends StatefulWidget {
  const __CLASSNAME__Screen({super.key});

  @override
  State<__CLASSNAME__Screen> createState() => ___CLASSNAME__ScreenState();
}

class ___CLASSNAME__ScreenState extends State<__CLASSNAME__Screen> {
  List<String> _items = const [];
  bool _loading = true;
  String? _error;

  @override
  void initState() {
    super.initState();
    _load();
  }

  Future<void> _load() async {
    try {
      final response = await http.get(kEndpoint);
      if (!mounted) return;
      if (response.statusCode != 200) {
        throw Exception('Request failed (${response.statusCode})');
      }
      final decoded = jsonDecode(response.body) as List<dynamic>;
      setState(() {
        _items = decoded.map((item) => item.toString()).toList();
        _loading = false;
      });
    } catch (error) {
      if (!mounted) return;
      setState(() {
        _error = 'Could not load items';
        _loading = false;
      });
    }
  }

  @override
  Widget build(BuildContext context) {
    return Scaffold(
      appBar: AppBar(title: const Text(kFeature)),
      body: SafeArea(
        child: _loading
            ? const Center(child: CircularProgressIndicator())
            : _error != null
                ? Center(child: Text(_error!))
                : ListView.builder(
                    itemCount: _items.length,
                    itemBuilder: (context, index) => Semantics(
                      button: true,
                      label: _items[index],
                      child: ListTile(
                        title: Text(_items[index]),
                        onTap: () {},
                      ),
                    ),
                  ),
      ),
    );
  }
}
"""

_SWIFTUI = """
import SwiftUI

struct __CLASSNAME__Item: Identifiable, Decodable {
    let id: String
    let title: String
}

@MainActor
final class __CLASSNAME__Model: ObservableObject {
    @Published private(set) var items: [__CLASSNAME__Item] = []
    @Published var errorMessage: String?

    private let endpoint = URL(string: "https://api.example.com/items")!

    func load() async {
        do {
            let (data, _) = try await URLSession.shared.data(from: endpoint)
            items = try JSONDecoder().decode([__CLASSNAME__Item].self, from: data)
        } catch {
            errorMessage = "Could not load items"
        }
    }
}

struct __CLASSNAME__View: View {
    @StateObject private var model = __CLASSNAME__Model()
    private let feature = __FEATURE_SWIFT__

    var body: some View {
        NavigationStack {
            List(model.items) { item in
                Text(item.title)
                    .accessibilityLabel(item.title)
                    .accessibilityAddTraits(.isButton)
            }
            .navigationTitle(feature)
            .refreshable { await model.load() }
            .task { await model.load() }
            .overlay {
                if let message = model.errorMessage {
                    Text(message)
                        .foregroundStyle(.red)
                        .accessibilityLabel(message)
                }
            }
        }
    }
}
"""

_COMPOSE = """
package com.example.app

import androidx.compose.foundation.clickable
import androidx.compose.foundation.layout.fillMaxSize
import androidx.compose.foundation.layout.padding
import androidx.compose.foundation.lazy.LazyColumn
import androidx.compose.foundation.lazy.items
import androidx.compose.material3.CircularProgressIndicator
import androidx.compose.material3.ExperimentalMaterial3Api
import androidx.compose.material3.Scaffold
import androidx.compose.material3.Text
import androidx.compose.material3.TopAppBar
import androidx.compose.runtime.Composable
import androidx.compose.runtime.LaunchedEffect
import androidx.compose.runtime.getValue
import androidx.compose.runtime.mutableStateOf
import androidx.compose.runtime.remember
import androidx.compose.runtime.setValue
import androidx.compose.ui.Modifier
import androidx.compose.ui.semantics.contentDescription
import androidx.compose.ui.semantics.semantics

private const val FEATURE = __FEATURE_KOTLIN__

data class __CLASSNAME__Item(val id: String, val title: String)

@OptIn(ExperimentalMaterial3Api::class)
@Composable
fun __CLASSNAME__Screen(
    loadItems: suspend () -> List<__CLASSNAME__Item>,
    onItemClick: (__CLASSNAME__Item) -> Unit,
) {
    var items by remember { mutableStateOf<List<__CLASSNAME__Item>>(emptyList()) }
    var loading by remember { mutableStateOf(true) }
    var error by remember { mutableStateOf<String?>(null) }

    LaunchedEffect(Unit) {
        try {
            items = loadItems()
        } catch (e: Exception) {
            error = "Could not load items"
        } finally {
            loading = false
        }
    }

    Scaffold(topBar = { TopAppBar(title = { Text(FEATURE) }) }) { padding ->
        when {
            loading -> CircularProgressIndicator(
                modifier = Modifier.padding(padding).semantics { contentDescription = "Loading" }
            )
            error != null -> Text(error.orEmpty(), modifier = Modifier.padding(padding))
            else -> LazyColumn(modifier = Modifier.fillMaxSize().padding(padding)) {
                items(items, key = { it.id }) { item ->
                    Text(
                        text = item.title,
                        modifier = Modifier
                            .clickable { onItemClick(item) }
                            .semantics { contentDescription = item.title },
                    )
                }
            }
        }
    }
}
"""


def react_native(ctx: TemplateContext) -> str:
    return ctx.header() + "\n" + render(
        _REACT_NATIVE, classname=ctx.class_name, feature_js=js_string(ctx.feature)
    )


def flutter(ctx: TemplateContext) -> str:
    return ctx.header() + "\n" + render(
        _FLUTTER, classname=ctx.class_name, feature_dart=interpolating_string(ctx.feature)
    )


def swiftui(ctx: TemplateContext) -> str:
    return ctx.header() + "\n" + render(
        _SWIFTUI, classname=ctx.class_name, feature_swift=swift_string(ctx.feature)
    )


def compose(ctx: TemplateContext) -> str:
    return ctx.header() + "\n" + render(
        _COMPOSE,
        classname=ctx.class_name,
        feature_kotlin=interpolating_string(ctx.feature),
    )
